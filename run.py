"""
Run script for the Production Table Engine backend.
This is a convenience wrapper around uvicorn.
"""

import os
import uvicorn

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    print("Starting Production Table Engine backend...")
    print(f"API will be available at http://localhost:{port}")
    print(f"API documentation at http://localhost:{port}/docs")
    print("Press Ctrl+C to stop the server")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True
    )
