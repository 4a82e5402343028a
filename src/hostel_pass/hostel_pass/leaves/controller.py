from __future__ import annotations

import io
import logging

import qrcode
from flask import Flask, jsonify, request, send_file

from ..common.web import current_actor, json_body, json_error, login_required, role_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import (
    AccessDeniedError,
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    RescanRequired,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ConflictError, 409),
    (RescanRequired, 422),
    (NotFoundError, 404),
    (AccessDeniedError, 403),
    (ValidationError, 400),
    (InvalidTransitionError, 400),
)


def _domain_error(e: DomainError):
    for exc_type, status in _STATUS_CODES:
        if isinstance(e, exc_type):
            extra = {"rescan": True} if isinstance(e, RescanRequired) else {}
            return json_error(str(e), status, **extra)
    return json_error(str(e), 400)


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "Server is running"})

    @app.route("/api/requests", methods=["GET"], endpoint="list_requests")
    @login_required
    def list_requests():
        try:
            rows = service.list_for(
                actor=current_actor(),
                status=request.args.get("status"),
                student_email=request.args.get("studentEmail"),
            )
            return jsonify([r.to_dict() for r in rows])
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Listing requests failed")
            return json_error("System error while loading requests", 500)

    @app.route("/api/requests/<request_id>", methods=["GET"], endpoint="get_request")
    @login_required
    def get_request(request_id: str):
        try:
            return jsonify(service.get(actor=current_actor(), request_id=request_id).to_dict())
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Loading request %s failed", request_id)
            return json_error("System error while loading the request", 500)

    @app.route("/api/requests", methods=["POST"], endpoint="create_request")
    @role_required(Role.STUDENT)
    def create_request():
        data = json_body()
        try:
            created = service.create(actor=current_actor(), from_date=data.get("fromDate"), to_date=data.get("toDate"))
            return jsonify(created.to_dict()), 201
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Creating request failed")
            return json_error("System error while submitting the request", 500)

    @app.route("/api/requests/<request_id>/decision", methods=["PUT"], endpoint="decide_request")
    @role_required(Role.WARDEN)
    def decide_request(request_id: str):
        data = json_body()
        try:
            decided = service.decide(
                actor=current_actor(),
                request_id=request_id,
                decision=data.get("decision") or data.get("status"),
            )
            return jsonify(decided.to_dict())
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Deciding request %s failed", request_id)
            return json_error("System error while deciding the request", 500)

    @app.route("/api/requests/<request_id>", methods=["DELETE"], endpoint="delete_request")
    @login_required
    def delete_request(request_id: str):
        try:
            service.remove(actor=current_actor(), request_id=request_id)
            return jsonify({"success": True, "message": "Request deleted successfully"})
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Deleting request %s failed", request_id)
            return json_error("System error while deleting the request", 500)

    @app.route("/api/scan", methods=["POST"], endpoint="scan_pass")
    @role_required(Role.SECURITY)
    def scan_pass():
        data = json_body()
        try:
            result = service.apply_scan(actor=current_actor(), payload_text=data.get("payload"))
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Scan failed")
            return json_error("System error while scanning", 500)

        return jsonify(
            {
                "success": result.changed,
                "outcome": result.outcome.value,
                "message": result.message,
                "rescan": not result.changed,
                "request": result.request.to_dict(),
            }
        )

    @app.route("/api/requests/<request_id>/qr", methods=["GET"], endpoint="request_qr_payload")
    @role_required(Role.STUDENT)
    def request_qr_payload(request_id: str):
        try:
            payload = service.qr_payload(actor=current_actor(), request_id=request_id)
            return jsonify({"success": True, "payload": payload})
        except DomainError as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Building pass for %s failed", request_id)
            return json_error("System error while building the pass", 500)

    @app.route("/api/requests/<request_id>/qr.png", methods=["GET"], endpoint="request_qr_image")
    @role_required(Role.STUDENT)
    def request_qr_image(request_id: str):
        """Student's pass as a QR image; security scans it at the gate."""
        try:
            payload = service.qr_payload(actor=current_actor(), request_id=request_id)
        except DomainError as e:
            return _domain_error(e)

        try:
            qr = qrcode.QRCode(
                version=None,
                error_correction=qrcode.constants.ERROR_CORRECT_M,
                box_size=8,
                border=2,
            )
            qr.add_data(payload)
            qr.make(fit=True)
            img = qr.make_image(fill_color="black", back_color="white")

            buf = io.BytesIO()
            img.save(buf, format="PNG")
            buf.seek(0)
            return send_file(buf, mimetype="image/png")
        except Exception:
            logger.exception("Rendering pass image for %s failed", request_id)
            return json_error("System error while rendering the pass", 500)
