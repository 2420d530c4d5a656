"""Giriş noktası: `uvicorn main:app --reload` (proje kökünden)."""
import os

import uvicorn

from storefront_admin.main import app

__all__ = ["app"]


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
