from __future__ import annotations

import os
import tempfile

from .certificates import RenderedCertificate


def save_certificate(certificate: RenderedCertificate, out_dir: str) -> str:
    """Write the PDF into ``out_dir`` under its own file name and return the path.

    The bytes land in a sibling temp file first and are renamed over the
    target, so a reader never sees a half-written certificate.
    """
    out_dir = out_dir or "."
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, certificate.filename)
    fd, tmp_path = tempfile.mkstemp(dir=out_dir, prefix=".cert-", suffix=".pdf.tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(certificate.pdf)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
    return path
