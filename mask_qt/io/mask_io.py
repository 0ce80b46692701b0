from __future__ import annotations
import base64, binascii, logging, re
from typing import Union

import numpy as np
from PySide6 import QtCore
from PySide6.QtGui import QImage

from mask_qt.core.data_models import Size
from mask_qt.errors import DimensionMismatchError, InvalidImageDataError

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:image/([a-zA-Z0-9+]+);base64,(.+)$", re.DOTALL)


# --------- QImage <-> numpy ----------
def qimage_to_array(img: QImage) -> np.ndarray:
    """Trả về mảng (h, w, 4) uint8 theo thứ tự RGBA."""
    img = img.convertToFormat(QImage.Format_RGBA8888)
    w, h, bpl = img.width(), img.height(), img.bytesPerLine()
    raw = np.frombuffer(bytes(img.constBits()), dtype=np.uint8, count=h * bpl)
    return raw.reshape(h, bpl)[:, :w * 4].reshape(h, w, 4).copy()


def array_to_qimage(arr: np.ndarray) -> QImage:
    arr = np.ascontiguousarray(arr, dtype=np.uint8)
    h, w = arr.shape[:2]
    return QImage(arr.tobytes(), w, h, w * 4, QImage.Format_RGBA8888).copy()


# --------- data URL / PNG ----------
def decode_data_url(data_url: str) -> bytes:
    """data:image/<fmt>;base64,<payload> -> bytes."""
    m = _DATA_URL_RE.match(data_url or "")
    if not m:
        raise InvalidImageDataError("Invalid image data: not a valid base64 image data URL")
    try:
        return base64.b64decode(m.group(2), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageDataError(f"Invalid base64 payload: {e}") from e


def qimage_from_bytes(data: bytes) -> QImage:
    img = QImage.fromData(data)
    if img.isNull():
        raise InvalidImageDataError("Không đọc được ảnh từ dữ liệu")
    return img


def qimage_to_png_bytes(img: QImage) -> bytes:
    if img.isNull():
        return b""
    buffer = QtCore.QBuffer()
    buffer.open(QtCore.QIODevice.WriteOnly)
    img.save(buffer, "PNG")
    return bytes(buffer.data())


def png_data_url(img: QImage) -> str:
    return "data:image/png;base64," + base64.b64encode(qimage_to_png_bytes(img)).decode("ascii")


def _size_of(obj: Union[QImage, Size]) -> Size:
    if isinstance(obj, Size):
        return obj
    return Size(obj.width(), obj.height())


def validate_mask_dimensions(image: Union[QImage, Size], mask: Union[QImage, Size]):
    """Mask phải đúng kích thước ảnh gốc trước khi gửi sang API chỉnh sửa."""
    img_size, mask_size = _size_of(image), _size_of(mask)
    logger.debug(f"Kích thước ảnh {img_size.as_tuple()}, mask {mask_size.as_tuple()}")
    if img_size != mask_size:
        raise DimensionMismatchError(img_size.as_tuple(), mask_size.as_tuple())


def to_alpha_mask(mask: QImage) -> QImage:
    """Mask đen/trắng -> RGBA với alpha = độ xám (đen = trong suốt)."""
    gray = mask.convertToFormat(QImage.Format_Grayscale8)
    rgba = qimage_to_array(gray.convertToFormat(QImage.Format_RGBA8888))
    out = rgba.copy()
    out[..., 3] = rgba[..., 0]
    return array_to_qimage(out)


def load_external_mask(data_url: str, image: Union[QImage, Size]) -> QImage:
    """Mask dán từ ngoài (data URL): giải mã rồi kiểm tra kích thước."""
    mask = qimage_from_bytes(decode_data_url(data_url))
    validate_mask_dimensions(image, mask)
    return mask
