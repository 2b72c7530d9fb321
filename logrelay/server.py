"""HTTP ingress accepting notifications for the relay."""

from __future__ import annotations

import logging

from flask import Flask, request

from .pipeline import Pipeline, SubmitResult

EMPTY_BODY_ERROR = "Empty or invalid message body received"


def create_app(pipeline: Pipeline) -> Flask:
    """Build the Flask app serving ``POST /notification``.

    The request body is the message text; ``sender`` and ``level`` are
    optional query parameters.
    """
    app = Flask(__name__)

    @app.route("/notification", methods=["POST"])
    def notification():  # type: ignore[no-untyped-def]
        text = request.get_data(as_text=True)
        sender = request.args.get("sender", "")
        level = request.args.get("level", "")

        result = pipeline.submit(text, sender=sender, level=level)
        if result is SubmitResult.EMPTY_BODY:
            logging.warning("Rejected empty notification from %s", request.remote_addr)
            pipeline.report_error(EMPTY_BODY_ERROR)
            return EMPTY_BODY_ERROR, 400, {"Content-Type": "text/plain; charset=utf-8"}
        if result is SubmitResult.BUSY:
            return "Server busy", 503, {"Content-Type": "text/plain; charset=utf-8"}
        return "Message received", 202, {"Content-Type": "text/plain; charset=utf-8"}

    return app
