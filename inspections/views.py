# inspections/views.py
from __future__ import annotations

import json
import logging
from functools import wraps

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.contrib.auth.models import User
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .forms import (
    EvidenceForm,
    FinalizeForm,
    JoinForm,
    ParameterUpdateForm,
    ProductDetailsForm,
    ScheduleInspectionForm,
    TaskForm,
    UserCreateForm,
)
from .importers import checklist_template_csv, import_checklist_csv
from .models import (
    ChatMessage,
    InspectionParameter,
    InspectionReport,
    Notification,
    ROLE_ADMIN,
    ROLE_INSPECTOR,
    Task,
)
from .services import checklist, signoff
from .services.accounts import LOGIN_ROLES, create_user, role_for
from .services.metrics import inspection_overview, reports_for
from .services.notifications import inspection_link, mark_all_read, mark_read, notify, unread_count
from .services.scheduling import schedule_inspection

logger = logging.getLogger(__name__)

# session key: {inspection_id: role} for people who joined through a link
SESSION_ROLES_KEY = "inspection_roles"


# -----------------------
# Helpers
# -----------------------
def api(view):
    """Turn rule violations into JSON errors."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ValidationError as exc:
            logger.warning("Refused %s %s: %s", request.method, request.path, "; ".join(exc.messages))
            return JsonResponse(
                {"ok": False, "error": " ".join(exc.messages), "code": getattr(exc, "code", None)},
                status=400,
            )
        except PermissionDenied as exc:
            return JsonResponse({"ok": False, "error": str(exc) or "Permission denied."}, status=403)
    return wrapper


def _payload(request: HttpRequest) -> dict:
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            raise ValidationError("Request body is not valid JSON.", code="invalid_json")
        if not isinstance(data, dict):
            raise ValidationError("Expected a JSON object.", code="invalid_json")
        return data
    return request.POST.dict()


def _form_error(form):
    return JsonResponse({"ok": False, "code": "invalid", "errors": form.errors.get_json_data()}, status=400)


def current_role(request: HttpRequest, report=None):
    role = role_for(request.user)
    if role == ROLE_ADMIN:
        return role
    if role == ROLE_INSPECTOR and (report is None or report.inspector_id == request.user.id):
        return role
    if report is not None:
        return request.session.get(SESSION_ROLES_KEY, {}).get(report.id)
    return None


def _require_role(request, report, *allowed):
    role = current_role(request, report)
    if role is None:
        raise PermissionDenied("Join the inspection first.")
    if allowed and role not in allowed:
        raise PermissionDenied(f"{role} cannot change this inspection.")
    return role


def _require_admin(request):
    if role_for(request.user) != ROLE_ADMIN:
        raise PermissionDenied("Admins only.")


def _iso(dt):
    return dt.isoformat() if dt else None


def _user_json(user):
    profile = getattr(user, "profile", None)
    return {"id": user.id, "username": user.username, "role": profile.role if profile else None}


def _evidence_json(item):
    return {
        "id": item.id,
        "name": item.name,
        "content_type": item.content_type,
        "url": item.image.url if item.image else None,
        "uploaded_at": _iso(item.uploaded_at),
    }


def _parameter_json(p):
    return {
        "position": p.position,
        "description": p.description,
        "nominal": p.nominal,
        "tolerance_type": p.tolerance_type,
        "tolerance_value": p.tolerance_value,
        "utl": p.utl,
        "ltl": p.ltl,
        "actual": p.actual,
        "deviation": p.deviation,
        "status": p.status,
        "gdt_symbol": p.gdt_symbol,
        "comment": p.comment,
        "evidence": [_evidence_json(e) for e in p.evidence.all()],
    }


def _report_summary_json(report):
    return {
        "id": report.id,
        "title": report.title,
        "inspector": report.inspector.username,
        "is_complete": report.is_complete,
        "final_status": report.final_status,
        "created_at": _iso(report.created_at),
        "completed_at": _iso(report.completed_at),
        "link": inspection_link(report),
    }


def _report_json(report, role):
    parameters = list(report.parameters.prefetch_related("evidence"))
    data = _report_summary_json(report)
    data.update({
        "product": {f: getattr(report, f) for f in checklist.PRODUCT_FIELDS},
        "parameters": [_parameter_json(p) for p in parameters],
        "signatures": {
            r: {"signed": s.signed, "comment": s.comment, "timestamp": _iso(s.signed_at)}
            for r, s in signoff.signature_sheet(report).items()
        },
        "evidence": [_evidence_json(e) for e in report.evidence.filter(parameter__isnull=True)],
        "summary": signoff.checklist_summary(parameters),
        "can_finalize": signoff.can_finalize(report),
        "allowed_final_statuses": signoff.allowed_final_statuses(report),
        "your_role": role,
        "editable": role == ROLE_INSPECTOR and not report.is_complete,
    })
    return data


def _chat_json(msg):
    return {"id": msg.id, "sender_role": msg.sender_role, "message": msg.message, "timestamp": _iso(msg.timestamp)}


def _notification_json(n):
    return {
        "id": n.id,
        "message": n.message,
        "type": n.type,
        "link": n.link,
        "read": n.read,
        "timestamp": _iso(n.created_at),
    }


def _task_json(task):
    return {"id": task.id, "text": task.text, "completed": task.completed}


# -----------------------
# Health
# -----------------------
def health(request: HttpRequest):
    return JsonResponse({"ok": True, "message": "Inspection service running"})


# -----------------------
# Session
# -----------------------
@require_POST
@api
def session_login(request: HttpRequest):
    data = _payload(request)
    user = authenticate(request, username=data.get("username") or "", password=data.get("password") or "")
    if user is None:
        return JsonResponse({"ok": False, "error": "Invalid username or password."}, status=400)

    role = role_for(user)
    if role not in LOGIN_ROLES:
        raise PermissionDenied(
            "This login is for Admins and Inspectors only. Please use an inspection link to join as another role."
        )

    login(request, user)
    return JsonResponse({"ok": True, "user": _user_json(user)})


@require_POST
def session_logout(request: HttpRequest):
    logout(request)
    return JsonResponse({"ok": True})


# -----------------------
# Admin: users + scheduling
# -----------------------
@login_required
@require_http_methods(["GET", "POST"])
@api
def users(request: HttpRequest):
    _require_admin(request)

    if request.method == "POST":
        form = UserCreateForm(_payload(request))
        if not form.is_valid():
            return _form_error(form)
        user = create_user(created_by=request.user, **form.cleaned_data)
        return JsonResponse({"ok": True, "user": _user_json(user)}, status=201)

    qs = User.objects.select_related("profile").order_by("username")
    return JsonResponse({"ok": True, "users": [_user_json(u) for u in qs]})


@login_required
@require_POST
@api
def schedule(request: HttpRequest):
    _require_admin(request)

    form = ScheduleInspectionForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)

    report = schedule_inspection(
        form.cleaned_data["title"],
        form.cleaned_data["inspector"],
        scheduled_by=request.user,
    )
    return JsonResponse({"ok": True, "inspection": _report_summary_json(report)}, status=201)


# -----------------------
# Dashboard
# -----------------------
@login_required
@require_GET
def dashboard(request: HttpRequest):
    """
    Dashboard:
    - counts overview (total / completed / approved / rejected / open)
    - unread notifications
    """
    reports = reports_for(request.user)
    return JsonResponse({
        "ok": True,
        "stats": inspection_overview(reports),
        "unread_notifications": unread_count(request.user),
    })


@login_required
@require_GET
def inspections_list(request: HttpRequest):
    reports = reports_for(request.user)
    return JsonResponse({"ok": True, "inspections": [_report_summary_json(r) for r in reports]})


@require_GET
def gdt_symbols(request: HttpRequest):
    return JsonResponse({"ok": True, "symbols": checklist.GDT_SYMBOLS})


# -----------------------
# Inspection room
# -----------------------
@require_GET
def inspection_detail(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport.objects.select_related("inspector"), id=inspection_id)
    return JsonResponse({"ok": True, "inspection": _report_json(report, current_role(request, report))})


@require_POST
@api
def join_inspection(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport.objects.select_related("inspector"), id=inspection_id)

    form = JoinForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    role = form.cleaned_data["role"]

    roles = request.session.get(SESSION_ROLES_KEY, {})
    roles[report.id] = role
    request.session[SESSION_ROLES_KEY] = roles

    # only link guests announce themselves
    if not request.user.is_authenticated:
        notify(report.inspector, f'{role} has joined inspection "{report.title}".', link=inspection_link(report))

    return JsonResponse({"ok": True, "inspection": _report_json(report, current_role(request, report))})


@require_POST
@api
def product_details(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    _require_role(request, report, ROLE_INSPECTOR)

    data = {f: getattr(report, f) for f in checklist.PRODUCT_FIELDS}
    data.update({k: v for k, v in _payload(request).items() if k in checklist.PRODUCT_FIELDS})

    form = ProductDetailsForm(data, instance=report)
    if not form.is_valid():
        return _form_error(form)

    checklist.update_product_details(report, form.cleaned_data)
    return JsonResponse({"ok": True, "product": {f: getattr(report, f) for f in checklist.PRODUCT_FIELDS}})


@require_POST
@api
def add_parameter(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    _require_role(request, report, ROLE_INSPECTOR)

    param = checklist.add_parameter(report)
    return JsonResponse({"ok": True, "parameter": _parameter_json(param)}, status=201)


@require_POST
@api
def update_parameter(request: HttpRequest, inspection_id: str, position: int):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    param = get_object_or_404(InspectionParameter, report=report, position=position)
    _require_role(request, report, ROLE_INSPECTOR)

    form = ParameterUpdateForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)

    param = checklist.update_parameter(param, form.changes())
    return JsonResponse({
        "ok": True,
        "parameter": _parameter_json(param),
        "summary": signoff.checklist_summary(report.parameters.all()),
    })


@require_POST
@api
def delete_parameter(request: HttpRequest, inspection_id: str, position: int):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    get_object_or_404(InspectionParameter, report=report, position=position)
    _require_role(request, report, ROLE_INSPECTOR)

    checklist.remove_parameter(report, position)
    return JsonResponse({"ok": True, "summary": signoff.checklist_summary(report.parameters.all())})


@require_http_methods(["GET", "POST"])
@api
def import_parameters(request: HttpRequest, inspection_id: str):
    """
    GET:
      - CSV template
    POST:
      - CSV upload under "file"; replace=1 drops the current checklist first
    """
    report = get_object_or_404(InspectionReport, id=inspection_id)

    if request.method == "GET":
        resp = HttpResponse(checklist_template_csv(), content_type="text/csv")
        resp["Content-Disposition"] = 'attachment; filename="checklist_import_template.csv"'
        return resp

    _require_role(request, report, ROLE_INSPECTOR)

    f = request.FILES.get("file")
    if not f:
        raise ValidationError("Please choose a CSV file.", code="required")

    replace = (request.POST.get("replace") or "").strip().lower() in ("1", "true", "yes")
    result = import_checklist_csv(report, f, replace=replace)
    if result.errors:
        return JsonResponse({"ok": False, "code": "invalid_csv", "errors": result.errors}, status=400)

    return JsonResponse({"ok": True, "created": result.created, "removed": result.removed})


def _save_evidence(request, report, parameter=None):
    signoff.ensure_open(report)

    form = EvidenceForm(request.POST, request.FILES)
    if not form.is_valid():
        return _form_error(form)

    upload = form.cleaned_data["image"]
    item = form.save(commit=False)
    item.report = report
    item.parameter = parameter
    item.name = upload.name
    item.content_type = getattr(upload, "content_type", "") or ""
    item.save()
    return JsonResponse({"ok": True, "evidence": _evidence_json(item)}, status=201)


@require_POST
@api
def report_evidence(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    _require_role(request, report, ROLE_INSPECTOR)
    return _save_evidence(request, report)


@require_POST
@api
def parameter_evidence(request: HttpRequest, inspection_id: str, position: int):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    param = get_object_or_404(InspectionParameter, report=report, position=position)
    _require_role(request, report, ROLE_INSPECTOR)
    return _save_evidence(request, report, parameter=param)


@require_POST
@api
def delete_parameter_evidence(request: HttpRequest, inspection_id: str, position: int, evidence_id: int):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    param = get_object_or_404(InspectionParameter.objects.select_related("report"), report=report, position=position)
    _require_role(request, report, ROLE_INSPECTOR)

    if not checklist.remove_parameter_evidence(param, evidence_id):
        return JsonResponse({"ok": False, "error": "Evidence not found."}, status=404)
    return JsonResponse({"ok": True})


# -----------------------
# Sign-off + finalize
# -----------------------
@require_POST
@api
def sign_off(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport.objects.select_related("inspector"), id=inspection_id)
    role = _require_role(request, report)

    comment = _payload(request).get("comment") or ""
    signature = signoff.sign_off(report, role, comment)
    return JsonResponse({
        "ok": True,
        "role": role,
        "timestamp": _iso(signature.signed_at),
        "can_finalize": signoff.can_finalize(report),
        "allowed_final_statuses": signoff.allowed_final_statuses(report),
    })


@require_POST
@api
def finalize(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport.objects.select_related("inspector"), id=inspection_id)
    role = _require_role(request, report)

    form = FinalizeForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)

    signoff.finalize(report, form.cleaned_data["final_status"])
    return JsonResponse({"ok": True, "inspection": _report_json(report, role)})


# -----------------------
# Chat
# -----------------------
@require_http_methods(["GET", "POST"])
@api
def chat(request: HttpRequest, inspection_id: str):
    report = get_object_or_404(InspectionReport, id=inspection_id)
    role = _require_role(request, report)

    if request.method == "POST":
        message = (_payload(request).get("message") or "").strip()
        if not message:
            raise ValidationError("Message cannot be empty.", code="required")
        msg = ChatMessage.objects.create(report=report, sender_role=role, message=message)
        return JsonResponse({"ok": True, "message": _chat_json(msg)}, status=201)

    messages_qs = report.chat_messages.all()
    return JsonResponse({"ok": True, "messages": [_chat_json(m) for m in messages_qs]})


# -----------------------
# Notifications
# -----------------------
@login_required
@require_GET
def notifications_list(request: HttpRequest):
    qs = Notification.objects.filter(user=request.user)
    return JsonResponse({
        "ok": True,
        "unread": unread_count(request.user),
        "notifications": [_notification_json(n) for n in qs[:100]],
    })


@login_required
@require_POST
def notification_read(request: HttpRequest, notification_id: int):
    if not mark_read(request.user, notification_id):
        return JsonResponse({"ok": False, "error": "Notification not found."}, status=404)
    return JsonResponse({"ok": True, "unread": unread_count(request.user)})


@login_required
@require_POST
def notifications_read_all(request: HttpRequest):
    updated = mark_all_read(request.user)
    return JsonResponse({"ok": True, "updated": updated, "unread": 0})


# -----------------------
# Tasks
# -----------------------
@login_required
@require_http_methods(["GET", "POST"])
@api
def tasks(request: HttpRequest):
    if request.method == "POST":
        form = TaskForm(_payload(request))
        if not form.is_valid():
            return _form_error(form)
        task = form.save(commit=False)
        task.user = request.user
        task.save()
        return JsonResponse({"ok": True, "task": _task_json(task)}, status=201)

    return JsonResponse({"ok": True, "tasks": [_task_json(t) for t in Task.objects.filter(user=request.user)]})


@login_required
@require_POST
@api
def task_update(request: HttpRequest, task_id: int):
    task = get_object_or_404(Task, id=task_id, user=request.user)

    data = {"text": task.text, "completed": task.completed}
    data.update(_payload(request))

    form = TaskForm(data, instance=task)
    if not form.is_valid():
        return _form_error(form)
    form.save()
    return JsonResponse({"ok": True, "task": _task_json(task)})


@login_required
@require_POST
def task_delete(request: HttpRequest, task_id: int):
    task = get_object_or_404(Task, id=task_id, user=request.user)
    task.delete()
    return JsonResponse({"ok": True})
