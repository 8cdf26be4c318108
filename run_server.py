#!/usr/bin/env python3
"""Run the sona API server."""

import logging
import os

import uvicorn


def main():
    logging.basicConfig(
        level=os.environ.get('SONA_LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    print("Starting Sona API server...")
    print("API documentation available at: http://localhost:8000/docs")
    uvicorn.run(
        "server.app:app",
        host="0.0.0.0",
        port=int(os.environ.get('SONA_PORT', '8000')),
        reload=True
    )


if __name__ == "__main__":
    main()
