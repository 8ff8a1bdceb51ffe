import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from gallery.config import GMAIL_ADDRESS, GMAIL_APP_PASSWORD, REPORT_EMAIL
from gallery.logging_config import get_logger
from gallery.utils.helpers import format_size

logger = get_logger(__name__)


def is_configured():
    return bool(GMAIL_ADDRESS and GMAIL_APP_PASSWORD and REPORT_EMAIL)


def _create_smtp():
    server = smtplib.SMTP("smtp.gmail.com", 587)
    server.starttls()
    server.login(GMAIL_ADDRESS, GMAIL_APP_PASSWORD)
    return server


def render_report_html(report):
    """Render a daily report as a small HTML email body."""
    rows = "".join(
        f"<tr><td>{escape(item['original_name'])}</td><td style=\"text-align:right;\">{item['likes']}</td></tr>"
        for item in report["likes_per_image"]
    ) or '<tr><td colspan="2">No likes today.</td></tr>'

    top = report.get("top_image_of_day")
    top_line = (
        f"<p>Top image: <strong>{escape(top['original_name'])}</strong> ({top['likes']} likes)</p>"
        if top else ""
    )
    totals = report["totals"]

    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 500px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #333;">Gallery report for {report['date']}</h2>
        <p><strong>{report['images_uploaded']['count']}</strong> image(s) uploaded,
           <strong>{report['likes_received']}</strong> like(s) received.</p>
        {top_line}
        <table style="width: 100%; border-collapse: collapse;">
            <tr><th style="text-align:left;">Image</th><th style="text-align:right;">Likes</th></tr>
            {rows}
        </table>
        <p style="margin-top: 20px; color: #666;">
            All time: {totals['images']} images, {totals['likes']} likes, {format_size(totals['size'])}.
        </p>
    </div>
    """


def send_report(report):
    """Email a daily report to REPORT_EMAIL. Returns True when sent."""
    if not is_configured():
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = f"Gallery report: {report['date']}"
    msg["From"] = GMAIL_ADDRESS
    msg["To"] = REPORT_EMAIL

    msg.attach(MIMEText(
        f"{report['images_uploaded']['count']} image(s) uploaded and "
        f"{report['likes_received']} like(s) received on {report['date']}.",
        "plain",
    ))
    msg.attach(MIMEText(render_report_html(report), "html"))

    try:
        server = _create_smtp()
        try:
            server.sendmail(GMAIL_ADDRESS, REPORT_EMAIL, msg.as_string())
        finally:
            server.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.error("report_email_failed", date=report["date"], error=str(e))
        return False

    logger.info("report_emailed", date=report["date"], to=REPORT_EMAIL)
    return True
