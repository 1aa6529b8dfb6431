from collections.abc import Mapping
from pathlib import Path

from urllib3.fields import RequestField
from urllib3.filepost import encode_multipart_formdata

from .errors import UploadReadError
from .request import UploadPart


def read_upload(part: UploadPart) -> bytes:
    if part.data is not None:
        return part.data

    try:
        return Path(part.file).read_bytes()
    except OSError as e:
        raise UploadReadError(f"Could not read upload file '{part.file}': {e}") from e


def build_multipart_body(
    part: UploadPart,
    payload: Mapping[str, str] | None = None,
    boundary: str | None = None,
) -> tuple[bytes, str]:
    """Encodes the file part followed by one text part per payload entry.

    The file part carries Content-Disposition and Content-Type, text parts only
    Content-Disposition, the way browsers submit forms. Returns the body and its
    Content-Type header value.
    """
    file_field = RequestField(name=part.field_name, data=read_upload(part), filename=part.filename)
    file_field.make_multipart(content_type=part.content_type)
    fields = [file_field]

    for name, value in (payload or {}).items():
        text_field = RequestField(name=name, data=value)
        text_field.make_multipart()
        fields.append(text_field)

    return encode_multipart_formdata(fields, boundary=boundary)
