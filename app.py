from hostwatch import create_app

# Create app instance for compatibility with gunicorn (run a single worker:
# each worker process keeps its own in-memory history)
app = create_app()

if __name__ == "__main__":
    debug_mode = app.config.get("DEBUG", False)
    host = app.config["HOST"]
    port = app.config["PORT"]

    app.logger.info(f"Starting hostwatch on {host}:{port}, debug={debug_mode}")
    # The reloader would fork a second process with its own sampler and store
    app.run(debug=debug_mode, host=host, port=port, use_reloader=False, threaded=True)
