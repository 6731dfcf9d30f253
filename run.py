#!/usr/bin/env python3
"""
Script para iniciar a IDE Umjunsik
"""
import logging
import os

import uvicorn

HOST = os.environ.get("UMJUNSIK_HOST", "0.0.0.0")
PORT = int(os.environ.get("UMJUNSIK_PORT", "8000"))
RELOAD = os.environ.get("UMJUNSIK_RELOAD", "1") not in ("0", "false", "no")
LOG_LEVEL = os.environ.get("UMJUNSIK_LOG_LEVEL", "INFO").upper()

def main():
    logging.basicConfig(level=LOG_LEVEL)
    print("🚀 Umjunsik IDE")
    print("=" * 50)
    print(f"🔄 Iniciando servidor FastAPI em http://{HOST}:{PORT} ...")

    try:
        uvicorn.run("main:app", host=HOST, port=PORT, reload=RELOAD, log_level=LOG_LEVEL.lower())
    except KeyboardInterrupt:
        print("\n👋 Servidor interrompido. Até logo!")

if __name__ == "__main__":
    main()
