from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
from concurrent.futures import ThreadPoolExecutor
import os

from config.settings import MailSettings, WaitlistSettings
from utils.logger import log_error, log_info
from utils.rate_limit import init_rate_limiter, RATE_LIMITS
from utils.validation import sanitize_text
from services.notification_service import NotificationService
from services.signup_store import SupabaseSignupStore
from services.waitlist_service import WaitlistService


def status_code_for(result):
    """HTTP status for an intake result"""
    status = result.get('status')
    if status == 'success':
        return 201
    if status == 'duplicate':
        return 200
    if result.get('error') == 'storage_failure':
        return 500
    return 400


def build_waitlist_service(settings: WaitlistSettings) -> WaitlistService:
    """Wire the production store, mailer and mail thread pool"""
    notifier = None
    executor = None
    if settings.send_emails:
        notifier = NotificationService(MailSettings.from_env())
        executor = ThreadPoolExecutor(max_workers=settings.mail_workers, thread_name_prefix='waitlist-mail')

    return WaitlistService(
        store=SupabaseSignupStore(settings.table_name),
        notifier=notifier,
        executor=executor,
        leaderboard_size=settings.leaderboard_size
    )


def create_app(service: WaitlistService = None, settings: WaitlistSettings = None, config: dict = None):
    settings = settings or WaitlistSettings.from_env()
    service = service or build_waitlist_service(settings)

    app = Flask(__name__)
    if config:
        app.config.update(config)
    if settings.trusted_proxies:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=settings.trusted_proxies)
    app.extensions['waitlist_service'] = service

    CORS(app, resources={
        r"/*": {
            "origins": settings.allowed_origins,
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    # Initialize rate limiter
    limiter = init_rate_limiter(app)

    @app.route('/')
    def home():
        return jsonify({
            "message": "Waitlist API",
            "status": "running",
            "version": "1.0.0"
        })

    @app.route('/health')
    @limiter.exempt
    def health_check():
        return jsonify({
            "status": "healthy",
            "message": "API is running successfully"
        })

    @app.route('/api/waitlist', methods=['POST'])
    @limiter.limit(RATE_LIMITS['moderate'])
    def join_waitlist():
        """Add a signup to the waitlist"""
        try:
            data = request.get_json(silent=True) or {}
            result = service.join_waitlist(data)
            return jsonify(result), status_code_for(result)
        except Exception as e:
            log_error("Error in join_waitlist", error=e)
            return jsonify({"status": "error", "message": str(e)}), 500

    @app.route('/api/waitlist', methods=['GET'])
    @limiter.limit(RATE_LIMITS['standard'])
    def waitlist_status():
        """Health check by default; ?action=leaderboard or ?action=stats&code=... for referral data"""
        try:
            action = sanitize_text(request.args.get('action', ''))

            if action == 'leaderboard':
                result = service.get_leaderboard()
                return jsonify(result), 200 if result['status'] == 'success' else 500

            if action == 'stats':
                code = sanitize_text(request.args.get('code', ''), max_length=64)
                if not code:
                    return jsonify({"status": "error", "message": "code parameter required"}), 400
                result = service.get_referral_stats(code)
                return jsonify(result), 200 if result['status'] == 'success' else 500

            return jsonify({"status": "ok", "message": "Waitlist API is running"}), 200
        except Exception as e:
            log_error("Error in waitlist_status", error=e)
            return jsonify({"status": "error", "message": str(e)}), 500

    log_info(f"Waitlist API configured (table={settings.table_name}, emails={'on' if service.notifier else 'off'})")
    return app


app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_ENV') == 'development'
    app.run(host='0.0.0.0', port=port, debug=debug)
