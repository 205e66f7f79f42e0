import argparse


def main():
    parser = argparse.ArgumentParser(description="Serve the BananoMiner dashboard.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", default=8000, type=int)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development).")
    args = parser.parse_args()

    import uvicorn

    uvicorn.run(
        "bananodash.services.dashboard.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
