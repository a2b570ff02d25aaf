from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_name, current_role, current_user_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    messages = container.message_service
    suggestions = container.suggestion_service

    @app.route("/api/messages", methods=["GET"], endpoint="api_messages")
    @api_view
    def api_messages():
        rows = messages.conversation(user_id=current_user_id(), contact_id=request.args.get("with") or None)
        return ok({"messages": [m.as_dict() for m in rows]})

    @app.route("/api/messages", methods=["POST"], endpoint="api_send_message")
    @api_view
    def api_send_message():
        data = json_body()
        message = messages.send(from_id=current_user_id(), to_id=data.get("toId", ""), text=data.get("text", ""))
        return ok({"message": message.as_dict()}, 201)

    @app.route("/api/messages/read", methods=["POST"], endpoint="api_mark_read")
    @api_view
    def api_mark_read():
        count = messages.mark_read(user_id=current_user_id(), contact_id=json_body().get("contactId", ""))
        return ok({"updated": count})

    @app.route("/api/messages/unread", methods=["GET"], endpoint="api_unread_counts")
    @api_view
    def api_unread_counts():
        return ok({"unread": messages.unread_counts(user_id=current_user_id())})

    @app.route("/api/suggestions", methods=["GET"], endpoint="api_suggestions")
    @api_view
    def api_suggestions():
        rows = suggestions.list_suggestions(current_role=current_role())
        return ok({"suggestions": [s.as_dict() for s in rows]})

    @app.route("/api/suggestions", methods=["POST"], endpoint="api_submit_suggestion")
    @api_view
    def api_submit_suggestion():
        suggestion = suggestions.submit(
            author_id=current_user_id(), author_name=current_name(), text=json_body().get("text", "")
        )
        return ok({"suggestion": suggestion.as_dict()}, 201)

    @app.route("/api/suggestions/<suggestion_id>", methods=["DELETE"], endpoint="api_delete_suggestion")
    @api_view
    def api_delete_suggestion(suggestion_id: str):
        suggestions.delete(current_role=current_role(), suggestion_id=suggestion_id)
        return ok()

    @app.route("/api/suggestions/<suggestion_id>/reply", methods=["POST"], endpoint="api_reply_suggestion")
    @api_view
    def api_reply_suggestion(suggestion_id: str):
        message = suggestions.reply(
            current_role=current_role(),
            from_id=current_user_id(),
            suggestion_id=suggestion_id,
            text=json_body().get("text", ""),
        )
        return ok({"message": message.as_dict()}, 201)
