"""Response helpers shared by the API routers."""

import io

from fastapi.responses import StreamingResponse

from salestrack.core.sales_export import XLSX_MEDIA_TYPE


def xlsx_response(content: bytes, filename: str) -> StreamingResponse:
    """Return workbook bytes as a non-cached attachment download."""
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        },
    )
