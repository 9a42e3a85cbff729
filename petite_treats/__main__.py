"""Run the storefront API: ``python -m petite_treats``."""

import uvicorn


if __name__ == "__main__":
    uvicorn.run("petite_treats.main:app", host="127.0.0.1", port=8000)
