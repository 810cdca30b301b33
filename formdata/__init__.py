"""formdata - incremental multipart/form-data (RFC 7578) encoder."""

from formdata.core.errors import BoundaryError, FormDataError, FormFinishedError, InvalidPartError
from formdata.core.settings import settings as _st
from formdata.form import FormData, open_form
from formdata.models.core import Field, FilePart, FormState

__version__ = _st.PROJECT_VERSION

__all__ = [
    "BoundaryError",
    "Field",
    "FilePart",
    "FormData",
    "FormDataError",
    "FormFinishedError",
    "FormState",
    "InvalidPartError",
    "open_form",
]
