import re
from html import escape
from typing import Dict, Tuple

from portfolio_site.core.validators import NOT_ENTERED, NOT_SELECTED, TERMS_AGREED, format_birthdate


class EmailTemplates:

    # Subject lines must not carry CR or LF
    HEADER_BREAKS = re.compile(r"[\r\n]+")

    AUTOMATED_NOTICE = (
        "このメールは自動送信されています。",
        "ご返信いただいても対応できない場合がございますのでご了承ください。",
    )

    @staticmethod
    def _details(data: Dict[str, str]) -> Dict[str, str]:
        """Resolve placeholders for the optional fields."""
        return {
            "name": data.get("name", ""),
            "email": data.get("email", ""),
            "birthdate": format_birthdate(
                data.get("birthdateYear", ""), data.get("birthdateMonth", ""), data.get("birthdateDay", "")
            ),
            "address": data.get("address") or NOT_ENTERED,
            "department": data.get("departmentName") or NOT_SELECTED,
            "message": data.get("message", ""),
            "terms": "同意済み" if data.get("termOfService") == TERMS_AGREED else "未同意",
        }

    @staticmethod
    def _header_safe(value: str) -> str:
        return EmailTemplates.HEADER_BREAKS.sub(" ", value).strip()

    @staticmethod
    def _text_lines(d: Dict[str, str]) -> list[str]:
        return [
            f"お名前: {d['name']}",
            f"メールアドレス: {d['email']}",
            f"生年月日: {d['birthdate']}",
            f"住所: {d['address']}",
            f"お問い合わせ部署: {d['department']}",
            "お問い合わせ内容:",
            d["message"],
        ]

    @staticmethod
    def _html_rows(d: Dict[str, str]) -> str:
        message_html = escape(d["message"]).replace("\n", "<br>")
        return f"""
  <p><strong>お名前:</strong> {escape(d['name'])}</p>
  <p><strong>メールアドレス:</strong> {escape(d['email'])}</p>
  <p><strong>生年月日:</strong> {escape(d['birthdate'])}</p>
  <p><strong>住所:</strong> {escape(d['address'])}</p>
  <p><strong>お問い合わせ部署:</strong> {escape(d['department'])}</p>
  <p><strong>お問い合わせ内容:</strong></p>
  <p>{message_html}</p>"""

    @staticmethod
    def operator_notification(data: Dict[str, str]) -> Tuple[str, str, str]:
        """Inquiry forwarded to the site operator. Returns (subject, text, html)."""
        d = EmailTemplates._details(data)
        subject = f"【お問い合わせ】{EmailTemplates._header_safe(d['name'])}様からのお問い合わせ"

        text = "\n".join(EmailTemplates._text_lines(d) + [f"利用規約への同意: {d['terms']}"]) + "\n"

        html = f"""<div>{EmailTemplates._html_rows(d)}
  <p><strong>利用規約への同意:</strong> {d['terms']}</p>
</div>
"""
        return subject, text, html

    @staticmethod
    def submitter_acknowledgment(data: Dict[str, str]) -> Tuple[str, str, str]:
        """Receipt sent back to the submitter. Returns (subject, text, html)."""
        d = EmailTemplates._details(data)
        subject = "【お問い合わせ確認】お問い合わせありがとうございます"

        text_lines = [
            f"{d['name']}様",
            "",
            "お問い合わせありがとうございます。",
            "以下の内容でお問い合わせを受け付けました。",
            "担当者より順次ご連絡いたします。",
            "",
            *EmailTemplates._text_lines(d),
            "",
            *EmailTemplates.AUTOMATED_NOTICE,
        ]
        text = "\n".join(text_lines) + "\n"

        html = f"""<div>
  <p>{escape(d['name'])}様</p>
  <p>お問い合わせありがとうございます。<br>以下の内容でお問い合わせを受け付けました。<br>担当者より順次ご連絡いたします。</p>
  <hr>{EmailTemplates._html_rows(d)}
  <hr>
  <p><small>{'<br>'.join(EmailTemplates.AUTOMATED_NOTICE)}</small></p>
</div>
"""
        return subject, text, html
