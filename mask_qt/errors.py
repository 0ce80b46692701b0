from __future__ import annotations


class MaskEditorError(Exception):
    """Lỗi gốc của trình vẽ mask."""


class StrokeSealedError(MaskEditorError):
    """Nét đã thả chuột thì không được thêm điểm nữa."""


class InvalidImageDataError(MaskEditorError):
    """Dữ liệu ảnh (data URL / bytes) không đọc được."""


class DimensionMismatchError(MaskEditorError):
    """Mask và ảnh gốc khác kích thước."""

    def __init__(self, image_size, mask_size):
        self.image_size = image_size
        self.mask_size = mask_size
        super().__init__(
            f"Image and mask must be the same size! "
            f"image={image_size[0]}x{image_size[1]} mask={mask_size[0]}x{mask_size[1]}"
        )
