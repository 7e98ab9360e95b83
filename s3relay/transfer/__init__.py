"""
Transfer module: bucket probe, streamed upload, object keys, cancellation.

Both the probe and the upload sign through one shared SignatureEngine.
"""

from s3relay.transfer.cancellation import CancelToken
from s3relay.transfer.keys import ObjectKeyGenerator
from s3relay.transfer.metrics import TransferMetrics
from s3relay.transfer.probe import ConnectionProbe, map_probe_status
from s3relay.transfer.upload import UploadTransport, build_access_url
from s3relay.transfer.preview import describe_attachment, file_extension, is_image

__all__ = [
    "CancelToken",
    "ObjectKeyGenerator",
    "TransferMetrics",
    "ConnectionProbe",
    "map_probe_status",
    "UploadTransport",
    "build_access_url",
    "describe_attachment",
    "file_extension",
    "is_image",
]
