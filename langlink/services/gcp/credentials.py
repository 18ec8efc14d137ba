"""Google credential discovery shared by the GCP adapters."""

import os
from typing import Optional


def ensure_credentials(credentials_path: Optional[str]):
    """Export GOOGLE_APPLICATION_CREDENTIALS unless the environment already has it."""
    if not credentials_path or "GOOGLE_APPLICATION_CREDENTIALS" in os.environ:
        return

    creds_path = credentials_path
    if not os.path.exists(creds_path):
        possible_paths = [
            os.path.join("langlink", "config", os.path.basename(creds_path)),
            os.path.join(os.getcwd(), os.path.basename(creds_path)),
        ]
        for path in possible_paths:
            if os.path.exists(path):
                creds_path = path
                break

    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = creds_path
