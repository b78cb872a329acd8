import logging
from datetime import datetime
from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file
from werkzeug.exceptions import BadRequest

from core.container import ServiceContainer
from core.enums import OrderType
from schemas.order import OrderPayload, StatusUpdate, ItemPatchRequest
from schemas.problem import ProblemCreate
from schemas.requisition import RequisitionCreate

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _services() -> ServiceContainer:
    return current_app.extensions["services"]


def _json_body():
    """Parsed JSON body ({} when empty or null); malformed JSON raises ValueError."""
    if not request.get_data(cache=True).strip():
        return {}
    try:
        body = request.get_json(force=True)
    except BadRequest as e:
        raise ValueError("请求体不是合法的 JSON") from e
    return {} if body is None else body


def _send_excel(content: bytes, filename: str):
    return send_file(BytesIO(content), mimetype=XLSX_MIMETYPE,
                     as_attachment=True, download_name=filename)


@api_bp.get("/health")
def health():
    return {"ok": True, "time": datetime.now().isoformat()}


# ---------- Orders (injection / slush / spray) ----------

@api_bp.get("/api/<order_type:order_type>")
def list_orders(order_type: OrderType):
    return jsonify(_services().orders(order_type).list_orders())


@api_bp.get("/api/<order_type:order_type>/<int:order_id>")
def get_order(order_type: OrderType, order_id: int):
    return jsonify(_services().orders(order_type).get_order(order_id))


@api_bp.post("/api/<order_type:order_type>")
def create_order(order_type: OrderType):
    payload = OrderPayload.model_validate(_json_body())
    order = _services().orders(order_type).create_order(payload.header(), payload.items)
    return jsonify(order), 201


@api_bp.put("/api/<order_type:order_type>/<int:order_id>")
def update_order(order_type: OrderType, order_id: int):
    payload = OrderPayload.model_validate(_json_body())
    order = _services().orders(order_type).update_order(order_id, payload.header(), payload.items)
    return jsonify(order)


@api_bp.delete("/api/<order_type:order_type>/<int:order_id>")
def delete_order(order_type: OrderType, order_id: int):
    _services().orders(order_type).delete_order(order_id)
    return jsonify({"success": True})


@api_bp.patch("/api/<order_type:order_type>/<int:order_id>/status")
def update_order_status(order_type: OrderType, order_id: int):
    payload = StatusUpdate.model_validate(_json_body())
    _services().orders(order_type).update_status(order_id, payload.status)
    return jsonify({"success": True})


@api_bp.patch("/api/<order_type:order_type>/<int:order_id>/items")
def patch_order_items(order_type: OrderType, order_id: int):
    """啤机填写 / 仓库填写: 局部更新明细行字段"""
    payload = ItemPatchRequest.model_validate(_json_body())
    updates = [u.model_dump() for u in payload.updates]
    updated = _services().orders(order_type).patch_items(order_id, updates)
    return jsonify({"success": True, "updated": updated})


# ---------- Problems ----------

@api_bp.get("/api/problems")
def list_problems():
    order_type = request.args.get("order_type") or request.args.get("type")
    order_id = request.args.get("order_id", type=int)
    return jsonify(_services().problem_service.list_problems(order_type, order_id))


@api_bp.post("/api/problems")
def create_problem():
    payload = ProblemCreate.model_validate(_json_body())
    return jsonify(_services().problem_service.create_problem(payload)), 201


@api_bp.patch("/api/problems/<int:problem_id>/resolve")
def resolve_problem(problem_id: int):
    return jsonify(_services().problem_service.resolve_problem(problem_id))


# ---------- Material prices & statistics ----------

@api_bp.get("/api/material-prices")
def get_material_prices():
    return jsonify(_services().material_service.get_prices())


@api_bp.put("/api/material-prices")
def replace_material_prices():
    return jsonify(_services().material_service.replace_prices(_json_body()))


@api_bp.get("/api/material-stats")
def material_stats():
    month = request.args.get("month")
    order_number = request.args.get("order_number")
    return jsonify(_services().material_service.get_material_stats(month, order_number))


@api_bp.get("/api/material-stats/export")
def export_material_stats():
    month = request.args.get("month")
    order_number = request.args.get("order_number")
    content = _services().material_service.export_material_stats_excel(month, order_number)
    return _send_excel(content, f"material-stats-{month or 'all'}.xlsx")


@api_bp.get("/api/injection-costs")
def injection_costs():
    return jsonify(_services().material_service.get_injection_costs(request.args.get("month")))


@api_bp.get("/api/injection-costs/export")
def export_injection_costs():
    month = request.args.get("month")
    content = _services().material_service.export_injection_costs_excel(month)
    return _send_excel(content, f"injection-costs-{month or 'all'}.xlsx")


# ---------- Requisitions ----------

@api_bp.get("/api/requisitions")
def list_requisitions():
    order_id = request.args.get("order_id", type=int)
    return jsonify(_services().requisition_service.list_requisitions(order_id))


@api_bp.post("/api/requisitions")
def create_requisition():
    payload = RequisitionCreate.model_validate(_json_body())
    return jsonify(_services().requisition_service.create_requisition(payload)), 201


@api_bp.patch("/api/requisitions/<int:requisition_id>/status")
def update_requisition_status(requisition_id: int):
    payload = StatusUpdate.model_validate(_json_body())
    return jsonify(_services().requisition_service.update_status(requisition_id, payload.status))


@api_bp.delete("/api/requisitions/<int:requisition_id>")
def delete_requisition(requisition_id: int):
    _services().requisition_service.delete_requisition(requisition_id)
    return jsonify({"success": True})


# ---------- Stats ----------

@api_bp.get("/api/stats")
def order_stats():
    return jsonify(_services().analysis_service.get_order_stats())
