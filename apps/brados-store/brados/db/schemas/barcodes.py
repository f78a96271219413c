from typing import Literal, Optional

from .common import DocumentModel, Number

BarcodeType = Literal["code128", "code39", "qr"]
BARCODE_TYPES = ("code128", "code39", "qr")


class BarcodeCreate(DocumentModel):
    label: str
    value: str
    barcode_type: BarcodeType
    color: str
    sort_order: Number = 0


class BarcodeUpdate(DocumentModel):
    label: Optional[str] = None
    value: Optional[str] = None
    barcode_type: Optional[BarcodeType] = None
    color: Optional[str] = None
    sort_order: Optional[Number] = None


class Barcode(BarcodeCreate):
    id: str
    created_at: str
    updated_at: str
