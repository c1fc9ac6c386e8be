"""HTML/PDF rendering of invoice documents."""

import logging
from datetime import date
from decimal import Decimal
from html import escape
from itertools import groupby
from pathlib import Path
from typing import Protocol

from hours.app.core.errors import RenderError
from hours.app.core.settings import get_settings
from hours.app.schemas.invoice_document import DocumentLineItem, InvoiceDocument

logger = logging.getLogger(__name__)

INVOICE_STYLE = """
    @page { size: letter; margin: 0.75in; }
    body { font-family: "Helvetica Neue", Helvetica, Arial, sans-serif; font-size: 10pt; color: #333; }
    .header { display: flex; justify-content: space-between; border-bottom: 2px solid #2c3e50; padding-bottom: 16px; margin-bottom: 24px; }
    .business-name { font-size: 20pt; font-weight: bold; color: #2c3e50; }
    .logo { max-width: 200px; height: auto; }
    .invoice-title { font-size: 18pt; font-weight: bold; color: #2c3e50; text-align: right; }
    .meta-row { text-align: right; margin: 2px 0; }
    .meta-label { font-weight: bold; color: #7f8c8d; }
    .section-label { font-weight: bold; color: #7f8c8d; text-transform: uppercase; font-size: 8pt; margin: 16px 0 6px; }
    .parties { display: flex; justify-content: space-between; margin-bottom: 20px; }
    .party { width: 45%; }
    table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
    th { background: #2c3e50; color: white; padding: 8px 10px; text-align: left; font-size: 9pt; }
    td { padding: 8px 10px; border-bottom: 1px solid #e0e0e0; }
    .right { text-align: right; }
    .contract-row td { background: #f4f6f7; font-weight: bold; }
    .subtotal td { font-style: italic; }
    .grand-total td { font-size: 12pt; font-weight: bold; border-top: 2px solid #2c3e50; }
    .payment { margin-top: 24px; padding: 12px; background: #f8f9fa; border-left: 4px solid #2c3e50; }
"""


class InvoiceRenderer(Protocol):
    def render(self, document: InvoiceDocument, output_path: Path) -> None:
        ...


def invoice_output_path(output_dir: Path, issue_date: date) -> Path:
    """Documents are named by issue date, so a second invoice on the same day overwrites the first."""
    return Path(output_dir).expanduser() / f"invoice_{issue_date:%Y-%m-%d}.pdf"


def _text(value) -> str:
    return escape(str(value)) if value else ""


def _money(amount: Decimal, currency: str) -> str:
    return f"{amount:,.2f} {currency}".strip()


def _address_lines(party) -> str:
    lines = [party.address]
    locality = " ".join(part for part in (party.city, party.state, party.zip_code) if part)
    lines.extend([locality, party.country])
    return "".join(f"<div>{_text(line)}</div>" for line in lines if line)


def _line_item_rows(line_items: list[DocumentLineItem]) -> str:
    rows = []
    for contract_number, items in groupby(line_items, key=lambda item: item.contract_number):
        items = list(items)
        first = items[0]
        rows.append(
            f'<tr class="contract-row"><td colspan="5">{_text(contract_number)} - {_text(first.contract_name)} '
            f"({_money(first.hourly_rate, first.currency)}/hr)</td></tr>"
        )
        for item in items:
            rows.append(
                "<tr>"
                f"<td>{item.date:%Y-%m-%d}</td>"
                f"<td>{_text(item.description)}</td>"
                f'<td class="right">{item.hours:.2f}</td>'
                f'<td class="right">{item.hourly_rate:,.2f}</td>'
                f'<td class="right">{_money(item.amount, item.currency)}</td>'
                "</tr>"
            )
        subtotal = sum((item.amount for item in items), Decimal("0.00"))
        rows.append(
            f'<tr class="subtotal"><td colspan="4" class="right">Subtotal {_text(contract_number)}</td>'
            f'<td class="right">{_money(subtotal, first.currency)}</td></tr>'
        )
    return "\n".join(rows)


def generate_invoice_html(document: InvoiceDocument) -> str:
    """Build the invoice as a standalone HTML page, suitable for PDF conversion."""
    business = document.business
    logo = Path(business.logo_path).expanduser() if business.logo_path else None
    if logo is not None and logo.exists():
        heading = f'<img class="logo" src="{escape(logo.as_uri())}" alt="{_text(business.business_name)}">'
    else:
        heading = f'<div class="business-name">{_text(business.business_name)}</div>'

    contact = [business.contact_name, business.email, business.phone, business.website]
    if business.tax_id:
        contact.append(f"Tax ID: {business.tax_id}")

    recipients_html = "".join(
        f"<div>{_text(r.name)}{', ' + _text(r.title) if r.title else ''} &lt;{_text(r.email)}&gt;"
        f"{' ' + _text(r.phone) if r.phone else ''}</div>"
        for r in document.recipients
    )
    if recipients_html:
        recipients_html = f'<div class="section-label">Attention</div>{recipients_html}'

    payment = document.payment_details
    payment_lines = [
        ("Bank", payment.bank_name),
        ("Account", payment.account_number),
        ("Routing", payment.routing_number),
        ("SWIFT", payment.swift_code),
        ("Terms", payment.payment_terms),
        ("Notes", payment.notes),
    ]
    payment_html = "".join(
        f'<div><span class="meta-label">{label}:</span> {_text(value)}</div>' for label, value in payment_lines if value
    )

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Invoice {_text(document.invoice_number)}</title>
    <style>{INVOICE_STYLE}</style>
</head>
<body>
    <div class="header">
        <div>
            {heading}
            {_address_lines(business)}
            {"".join(f"<div>{_text(line)}</div>" for line in contact if line)}
        </div>
        <div>
            <div class="invoice-title">INVOICE</div>
            <div class="meta-row"><span class="meta-label">Number:</span> {_text(document.invoice_number)}</div>
            <div class="meta-row"><span class="meta-label">Issued:</span> {document.issue_date:%B %d, %Y}</div>
            <div class="meta-row"><span class="meta-label">Due:</span> {document.due_date:%B %d, %Y}</div>
        </div>
    </div>

    <div class="parties">
        <div class="party">
            <div class="section-label">Bill To</div>
            <div><strong>{_text(document.client.name)}</strong></div>
            {_address_lines(document.client)}
        </div>
        <div class="party">{recipients_html}</div>
    </div>

    <table>
        <thead>
            <tr>
                <th>Date</th>
                <th>Description</th>
                <th class="right">Hours</th>
                <th class="right">Rate</th>
                <th class="right">Amount</th>
            </tr>
        </thead>
        <tbody>
            {_line_item_rows(document.line_items)}
        </tbody>
        <tfoot>
            <tr class="grand-total">
                <td colspan="2" class="right">Total</td>
                <td class="right">{document.total_hours:.2f}</td>
                <td></td>
                <td class="right">{_money(document.total_amount, document.currency)}</td>
            </tr>
        </tfoot>
    </table>

    <div class="payment">
        <div class="section-label">Payment Details</div>
        {payment_html}
    </div>
</body>
</html>"""


def generate_invoice_pdf(html: str, output_path: Path) -> None:
    """Convert invoice HTML to PDF using WeasyPrint."""
    from weasyprint import HTML

    output_path.parent.mkdir(parents=True, exist_ok=True)
    HTML(string=html).write_pdf(str(output_path))


class HtmlPdfInvoiceRenderer:
    def render(self, document: InvoiceDocument, output_path: Path) -> None:
        try:
            generate_invoice_pdf(generate_invoice_html(document), output_path)
        except Exception as exc:
            logger.warning("Rendering invoice %s failed: %s", document.invoice_number, exc)
            raise RenderError(f"failed to generate invoice document: {exc}") from exc
        logger.info("Wrote invoice %s to %s", document.invoice_number, output_path)


def get_renderer() -> InvoiceRenderer:
    return HtmlPdfInvoiceRenderer()


def get_output_dir() -> Path:
    return get_settings().invoice_output_dir
