from __future__ import annotations

import logging

from flask import Flask, session

from ..common.web import api_view, current_role, fail, json_body, ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    accounts = container.account_service

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def api_login():
        try:
            data = json_body()
            user = auth.authenticate(data.get("username", ""), data.get("password", ""))
        except AuthenticationError as e:
            return fail(str(e), 401)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Login failed unexpectedly")
            return fail("Internal server error", 500)

        session.clear()
        session.permanent = True
        session["user_id"] = user.user_id
        session["name"] = user.full_name
        session["role"] = user.role.value
        session["employee_id"] = user.employee_id
        return ok(
            {
                "user": {
                    "id": user.user_id,
                    "fullName": user.full_name,
                    "role": user.role.value,
                    "employeeId": user.employee_id,
                }
            }
        )

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    @api_view
    def api_logout():
        auth.logout(employee_id=session.get("employee_id"))
        session.clear()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @api_view
    def api_me():
        return ok(
            {
                "user": {
                    "id": session["user_id"],
                    "fullName": session.get("name"),
                    "role": session.get("role"),
                    "employeeId": session.get("employee_id"),
                }
            }
        )

    @app.route("/api/accounts", methods=["GET"], endpoint="api_accounts")
    @api_view
    def api_accounts():
        return ok({"accounts": [u.as_dict() for u in accounts.list_accounts(current_role=current_role())]})

    @app.route("/api/accounts", methods=["POST"], endpoint="api_create_account")
    @api_view
    def api_create_account():
        data = json_body()
        try:
            role = Role(data.get("role", ""))
        except ValueError:
            raise ValidationError("Unknown role")
        user = accounts.create_account(
            current_role=current_role(),
            full_name=data.get("fullName", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=role,
        )
        return ok({"account": user.as_dict()}, 201)

    @app.route("/api/accounts/<user_id>", methods=["DELETE"], endpoint="api_delete_account")
    @api_view
    def api_delete_account(user_id: str):
        accounts.delete_account(current_role=current_role(), user_id=user_id)
        return ok()
