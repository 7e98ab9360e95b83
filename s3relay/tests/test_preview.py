"""
Unit Tests: Attachment Preview Helpers
"""

from s3relay.core.errors import TransferError
from s3relay.core.types import UploadResult
from s3relay.transfer.preview import describe_attachment, file_extension, is_image


class TestPreview:
    """Tests for attachment classification."""

    def test_is_image(self):
        assert is_image("image/png")
        assert is_image(" IMAGE/JPEG ")
        assert not is_image("application/pdf")
        assert not is_image(None)
        assert not is_image("")

    def test_file_extension(self):
        assert file_extension("Report.PDF") == "pdf"
        assert file_extension("README") == ""

    def test_describe_success(self):
        result = UploadResult.ok(
            access_url="https://cdn.x.com/up/2025/0307/abcd1234.png",
            original_file_name="shot.PNG",
            mime_type="image/png",
            object_key="up/2025/0307/abcd1234.png",
        )
        assert describe_attachment(result) == {
            "url": "https://cdn.x.com/up/2025/0307/abcd1234.png",
            "file_name": "shot.PNG",
            "mime_type": "image/png",
            "extension": "png",
            "is_image": True,
        }

    def test_describe_failure(self):
        assert describe_attachment(UploadResult.failed(TransferError.cancelled())) is None
