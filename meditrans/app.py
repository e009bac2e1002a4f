from flask import Flask, request, jsonify
from flask_cors import CORS
import logging

from meditrans import config
from meditrans.ai import AIService, SUMMARY_FAILED

app = Flask(__name__)

CORS(app, resources={
    r"/api/*": {
        "origins": [config.FRONTEND_ORIGIN],
        "methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type"],
    }
})

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("meditrans-api")

ai_service = AIService()
if not ai_service.configured:
    logger.warning("GROQ_API_KEY not set; translations will return error text")


def _json_object():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@app.route("/", methods=["GET"])
def home():
    return "MediTrans API is running", 200


@app.route("/health", methods=["GET"])
def health():
    return jsonify({
        "status": "ok",
        "model": ai_service.model,
        "configured": ai_service.configured,
    }), 200


@app.route("/api/translate", methods=["POST"])
def translate():
    """
    Body: {"text": "...", "targetLang": "es" | "en"}
    Returns the translation result object as-is.
    """
    try:
        body = _json_object()
        text = body.get("text")
        target_lang = body.get("targetLang")
        if not text or not target_lang:
            return jsonify({"error": "Missing text or targetLang"}), 400

        result = ai_service.translate(text, target_lang)
        return jsonify(result), 200

    except Exception as e:
        logger.exception("Translate endpoint error")
        return jsonify({"error": str(e)}), 500


@app.route("/api/summary", methods=["POST"])
def summary():
    """
    Body: {"text": "<role>: <originalText>\\n..."}
    """
    try:
        body = _json_object()
        text = body.get("text") or ""

        result = ai_service.summarize(text)
        if not result or result == SUMMARY_FAILED:
            return jsonify({"error": SUMMARY_FAILED}), 502
        return jsonify({"summary": result}), 200

    except Exception as e:
        logger.exception("Summary endpoint error")
        return jsonify({"error": str(e)}), 500


def main():
    app.run(host="0.0.0.0", port=config.PORT, debug=False)


if __name__ == "__main__":
    main()
