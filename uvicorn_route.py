#!/usr/bin/env python3
import uvicorn
from circulate.configs import OPTIONS

if __name__ == "__main__":
    print(f"Starting uvicorn server on port {OPTIONS['port']}...")
    uvicorn.run("circulate.app:app", **OPTIONS)
