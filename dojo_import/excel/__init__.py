from .reader import DecodedSheet, SheetReadError, decode_frame, read_sheet

__all__ = [
    "DecodedSheet",
    "SheetReadError",
    "decode_frame",
    "read_sheet",
]
