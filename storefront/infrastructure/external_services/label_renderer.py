"""
Sample 4x6 shipping label rendered locally for mock mode
"""

import io
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Tuple

from pypdf import PdfWriter
from pypdf.annotations import FreeText

from ...core.config import settings

# 4x6 inches in points
LABEL_WIDTH = 288
LABEL_HEIGHT = 432
MARGIN = 10
SAMPLE_BANNER = "SAMPLE - NOT FOR MAILING"


@dataclass
class LabelLine:
    text: str
    size: int = 9
    bold: bool = False


def _weight_text(weight_lb: float) -> str:
    pounds = int(weight_lb)
    ounces = round((weight_lb - pounds) * 16, 1)
    if pounds and ounces:
        return f"{pounds} LB {ounces:g} OZ"
    if pounds:
        return f"{pounds} LB"
    return f"{ounces:g} OZ"


def label_lines(
    order_number: str,
    to_address: Dict[str, Any],
    mail_class: str,
    tracking_number: str,
    weight_lb: float,
    dimensions: Tuple[float, float, float],
    mailing_date: str,
) -> List[LabelLine]:
    """Text of the sample label, top to bottom"""
    to_name = " ".join(part for part in (to_address.get("first_name"), to_address.get("last_name")) if part)
    from_city = ", ".join(part for part in (settings.USPS_FROM_CITY, settings.USPS_FROM_STATE) if part)

    lines = [
        LabelLine(f"USPS {mail_class.replace('_', ' ')}", size=12, bold=True),
        LabelLine(SAMPLE_BANNER, size=8, bold=True),
        LabelLine(f"Mailing date: {mailing_date}", size=8),
        LabelLine("FROM:", size=7, bold=True),
        LabelLine(settings.USPS_FROM_FIRM or settings.USPS_FROM_NAME, size=8, bold=True),
    ]
    if settings.USPS_FROM_STREET:
        lines.append(LabelLine(settings.USPS_FROM_STREET, size=8))
    if from_city or settings.USPS_FROM_ZIP:
        lines.append(LabelLine(f"{from_city} {settings.USPS_FROM_ZIP or ''}".strip(), size=8))

    lines.append(LabelLine("SHIP TO:", size=7, bold=True))
    if to_name:
        lines.append(LabelLine(to_name, size=13, bold=True))
    lines.append(LabelLine(to_address["address1"], size=11))
    if to_address.get("address2"):
        lines.append(LabelLine(to_address["address2"], size=11))
    lines.append(LabelLine(f"{to_address['city']}, {to_address['state']}  {to_address['zip'][:5]}", size=12, bold=True))

    length_in, width_in, height_in = dimensions
    lines.extend([
        LabelLine(f"Weight: {_weight_text(weight_lb)}   Dims: {length_in:g} x {width_in:g} x {height_in:g} in", size=8),
        LabelLine(f"Order {order_number}", size=8),
        LabelLine("USPS TRACKING #", size=8, bold=True),
        LabelLine(" ".join(tracking_number[i:i + 4] for i in range(0, len(tracking_number), 4)), size=11, bold=True),
    ])
    return lines


def render_sample_label(lines: List[LabelLine], title: Optional[str] = None) -> bytes:
    """One 4x6 page with each line as a free-text annotation"""
    writer = PdfWriter()
    writer.add_blank_page(width=LABEL_WIDTH, height=LABEL_HEIGHT)

    top = LABEL_HEIGHT - MARGIN
    for line in lines:
        height = line.size + 6
        annotation = FreeText(
            text=line.text,
            rect=(MARGIN, top - height, LABEL_WIDTH - MARGIN, top),
            font="Helvetica",
            bold=line.bold,
            font_size=f"{line.size}pt",
            font_color="000000",
            border_color="ffffff",
            background_color="ffffff",
        )
        writer.add_annotation(page_number=0, annotation=annotation)
        top -= height + 2

    if title:
        writer.add_metadata({"/Title": title})

    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
