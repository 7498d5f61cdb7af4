#!/usr/bin/env python3
"""
Development server runner for the vidshare API.
"""

import os

import uvicorn
from dotenv import load_dotenv

if __name__ == "__main__":
    load_dotenv()

    print("🚀 Starting vidshare API server...")

    from vidshare.web.app.main import app

    port = int(os.getenv("PORT", "8000"))
    print(f"📍 API: http://localhost:{port}/api/videos")
    print(f"❤️  Health check: http://localhost:{port}/health")
    print("\n" + "="*50)

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
