"""HTML bodies and subjects for waitlist emails"""
from datetime import datetime

from markupsafe import escape

from config.settings import MailSettings

FONT_STACK = "-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Helvetica,Arial,sans-serif"
BRAND_GREEN = '#184c3c'

TOP_PRIZE_CUTOFF = 5
LEADERBOARD_CUTOFF = 10

PRODUCT_PITCH = (
    "We're building AI-powered property management that works across borders. "
    "You'll be among the first to try it when we launch in Q2 2026."
)


def _paragraph(html: str, bottom_margin: int = 16) -> str:
    return (
        f'<p style="color:#414346;font-size:16px;line-height:1.6;margin:0 0 {bottom_margin}px 0;">'
        f'{html}</p>'
    )


def _button(href: str, label: str) -> str:
    return f"""
    <table width="100%" cellpadding="0" cellspacing="0" border="0"><tr><td align="center" style="padding:0 0 24px 0;">
        <a href="{escape(href)}" style="display:inline-block;background-color:{BRAND_GREEN};color:#ffffff;padding:14px 40px;border-radius:8px;text-decoration:none;font-size:16px;font-weight:600;font-family:{FONT_STACK};">
            {escape(label)}
        </a>
    </td></tr></table>
    """


def _stat_box(value: str, label: str) -> str:
    return f"""
    <td width="50%" align="center" valign="top" style="padding:0 8px;">
        <table cellpadding="0" cellspacing="0" border="0" style="background-color:#f5f6f8;border-radius:8px;width:100%;"><tr><td align="center" style="padding:20px;">
            <p style="color:{BRAND_GREEN};font-size:32px;font-weight:700;margin:0;font-family:{FONT_STACK};">{escape(value)}</p>
            <p style="color:#66696d;font-size:11px;margin:6px 0 0 0;text-transform:uppercase;letter-spacing:0.5px;font-family:{FONT_STACK};">{escape(label)}</p>
        </td></tr></table>
    </td>
    """


def email_shell(settings: MailSettings, body: str) -> str:
    """Shared layout: logo, accent divider, body, help line, footer"""
    brand = escape(settings.from_name)
    site = escape(settings.site_url)
    contact = escape(settings.from_email)
    return f"""<!DOCTYPE html>
<html><head><meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1.0"><title>{brand}</title></head>
<body style="margin:0;padding:0;background-color:#f5f6f8;">
<table width="100%" cellpadding="0" cellspacing="0" border="0" style="background-color:#f5f6f8;">
<tr><td align="center" style="padding:40px 20px;">
<table width="600" cellpadding="0" cellspacing="0" border="0" style="background-color:#ffffff;border-radius:12px;overflow:hidden;">
    <tr><td align="center" style="padding:40px 40px 24px 40px;">
        <img src="{escape(settings.logo_url)}" alt="{brand}" width="130" height="39" style="display:block;border:0;" />
    </td></tr>
    <tr><td align="center" style="padding:0 40px;">
        <table width="80" cellpadding="0" cellspacing="0" border="0"><tr>
            <td style="height:3px;background-color:#00e751;border-radius:2px;font-size:0;line-height:0;">&nbsp;</td>
        </tr></table>
    </td></tr>
    <tr><td style="padding:32px 40px 40px 40px;font-family:{FONT_STACK};">
        {body}
    </td></tr>
    <tr><td style="padding:0 40px 32px 40px;font-family:{FONT_STACK};">
        <p style="color:#414346;font-size:14px;line-height:1.6;margin:0;">
            Have questions or need help? Find answers on our <a href="{site}#faq" style="color:{BRAND_GREEN};font-weight:600;text-decoration:none;">FAQ page</a>,
            or contact us at <a href="mailto:{contact}" style="color:{BRAND_GREEN};font-weight:600;text-decoration:none;">{contact}</a>.
        </p>
    </td></tr>
    <tr><td style="border-top:1px solid #e5e5e5;padding:24px 40px;text-align:center;font-family:{FONT_STACK};">
        <p style="color:#9a9ea3;font-size:12px;line-height:1.8;margin:0;">
            {brand}<br><a href="{site}" style="color:#9a9ea3;text-decoration:none;">{site}</a><br>
            &copy; {datetime.now().year} {brand}. All rights reserved.
        </p>
        <p style="margin:12px 0 0 0;">
            <a href="{site}#privacy" style="color:{BRAND_GREEN};font-size:12px;font-weight:600;text-decoration:none;">Privacy policy</a>
        </p>
    </td></tr>
</table>
</td></tr>
</table>
</body></html>"""


def welcome_subject(settings: MailSettings, first_name: str) -> str:
    return f"Welcome to the {settings.from_name} waitlist, {first_name}!"


def render_welcome_email(settings: MailSettings, first_name: str, referral_code: str) -> str:
    """Welcome email sent to every new registrant, carrying their referral link"""
    referral_link = settings.referral_link(referral_code)
    body = f"""
    <h1 style="color:#1f2022;font-size:24px;font-weight:700;margin:0 0 28px 0;text-align:center;">You're on the Waitlist!</h1>
    {_paragraph(f"Hi {escape(first_name)},")}
    {_paragraph(f"You're officially on the {escape(settings.from_name)} waitlist. As one of our first members, you've locked in <strong>20% off for life</strong> on all paid plans.")}
    {_paragraph(PRODUCT_PITCH)}
    {_paragraph(f"Want to unlock <strong>50% off for life</strong>? The top {TOP_PRIZE_CUTOFF} referrers on our leaderboard before launch win. Share your unique link to start climbing.", 32)}
    {_button(referral_link, 'Share Your Referral Link')}
    <p style="color:#66696d;font-size:13px;line-height:1.5;margin:0 0 32px 0;text-align:center;">
        Your referral link: <a href="{escape(referral_link)}" style="color:{BRAND_GREEN};word-break:break-all;">{escape(referral_link)}</a>
    </p>
    """
    return email_shell(settings, body)


def position_message(referral_count: int, position: int) -> str:
    """Copy describing where the referrer stands on the leaderboard"""
    if position <= TOP_PRIZE_CUTOFF:
        return (
            f"You're in the <strong>top {TOP_PRIZE_CUTOFF}</strong> &mdash; you're on track for 50% off for life! "
            "Keep sharing to hold your spot."
        )
    if position <= LEADERBOARD_CUTOFF:
        return (
            f"You're <strong>#{position}</strong> on the leaderboard. "
            f"A few more referrals could put you in the top {TOP_PRIZE_CUTOFF} for 50% off for life!"
        )
    plural = '' if referral_count == 1 else 's'
    return (
        f"You have <strong>{referral_count} referral{plural}</strong> so far. "
        "Keep sharing to climb the leaderboard and compete for 50% off for life."
    )


def referral_subject(settings: MailSettings, referrer_first_name: str, new_first_name: str) -> str:
    return f"{referrer_first_name}, your referral {new_first_name} just joined {settings.from_name}!"


def render_referral_email(
    settings: MailSettings,
    referrer_first_name: str,
    new_first_name: str,
    new_last_initial: str,
    referral_count: int,
    position: int
) -> str:
    """Notification sent to a referrer when someone signs up with their link"""
    body = f"""
    <h1 style="color:#1f2022;font-size:24px;font-weight:700;margin:0 0 28px 0;text-align:center;">New Referral Signup!</h1>
    {_paragraph(f"Hi {escape(referrer_first_name)},")}
    {_paragraph(f"<strong>{escape(new_first_name)} {escape(new_last_initial)}.</strong> just joined the {escape(settings.from_name)} waitlist using your referral link.")}
    {_paragraph(position_message(referral_count, position), 24)}
    <table width="100%" cellpadding="0" cellspacing="0" border="0" style="margin:0 0 32px 0;"><tr>
        {_stat_box(str(referral_count), 'Referrals')}
        {_stat_box(f"#{position}", 'Rank')}
    </tr></table>
    {_button(f"{settings.site_url}#leaderboard", 'View the Leaderboard')}
    """
    return email_shell(settings, body)
