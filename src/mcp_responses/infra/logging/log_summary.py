from __future__ import annotations

import datetime as _dt
import json
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class RunSummary:
    session_id: str
    model: str = ""
    provider: str = ""
    run_date: str = ""
    round_trips: int = 0
    approvals_granted: int = 0
    approvals_denied: int = 0
    tool_counts: dict[str, int] = field(default_factory=dict)
    total_tokens: int = 0
    status: str = ""
    done: bool = False


@dataclass
class LogDetails:
    session_id: str
    model: str = ""
    prompt: str = ""
    status: str = ""
    round_trips: int = 0
    approvals: list[str] = field(default_factory=list)
    tools_listed: dict[str, list[str]] = field(default_factory=dict)
    tools_used: list[str] = field(default_factory=list)
    answer: str = ""


def _iter_records(fp: Path):
    for line in fp.read_text(encoding="utf-8").splitlines():
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            yield obj


def parse_log_file(fp: Path) -> RunSummary:
    """Summarize one session JSONL log.

    Round-trips are counted from `llm_request` events so that failed runs
    still report how far they got.
    """
    summary = RunSummary(session_id=fp.stem)

    for obj in _iter_records(fp):
        msg = obj.get("message")

        if msg == "conversation_started":
            summary.model = summary.model or str(obj.get("model") or "")
            summary.provider = summary.provider or str(obj.get("provider") or "")
            if not summary.run_date and isinstance(obj.get("timestamp"), str):
                summary.run_date = obj["timestamp"]

        elif msg == "llm_request":
            summary.round_trips += 1
            summary.model = summary.model or str(obj.get("model") or "")

        elif msg == "llm_usage":
            tokens = obj.get("total_tokens")
            if isinstance(tokens, int):
                summary.total_tokens += tokens

        elif msg == "approval_decided":
            if obj.get("approved") is True:
                summary.approvals_granted += 1
            else:
                summary.approvals_denied += 1

        elif msg == "tool_called":
            marker = f"{obj.get('server_label')}.{obj.get('tool_name')}"
            summary.tool_counts[marker] = summary.tool_counts.get(marker, 0) + 1

        elif msg == "final_result":
            result = obj.get("result") or {}
            status = result.get("status")
            if isinstance(status, str):
                summary.status = status
            summary.done = True

    if not summary.run_date:
        ts = fp.stat().st_mtime
        summary.run_date = _dt.datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")
    return summary


def parse_log_details(fp: Path) -> LogDetails:
    details = LogDetails(session_id=fp.stem)
    used: set[str] = set()

    for obj in _iter_records(fp):
        msg = obj.get("message")

        if msg == "conversation_started":
            details.model = details.model or str(obj.get("model") or "")
            prompt = obj.get("prompt")
            if isinstance(prompt, str) and not details.prompt:
                details.prompt = prompt

        elif msg == "llm_request":
            details.round_trips += 1

        elif msg == "tool_definitions":
            label = str(obj.get("server_label") or "")
            listed = details.tools_listed.setdefault(label, [])
            for name in obj.get("added") or []:
                if name not in listed:
                    listed.append(name)

        elif msg == "tool_called":
            used.add(f"{obj.get('server_label')}.{obj.get('tool_name')}")

        elif msg == "approval_decided":
            verdict = "approved" if obj.get("approved") is True else "denied"
            details.approvals.append(f"{obj.get('server_label')}.{obj.get('tool_name')}: {verdict}")

        elif msg == "final_result":
            result = obj.get("result") or {}
            if isinstance(result.get("status"), str):
                details.status = result["status"]
            if isinstance(result.get("raw_text"), str):
                details.answer = result["raw_text"]

    details.tools_used = sorted(used)
    return details


def summarize_logs(logs_dir: Path) -> dict[str, RunSummary]:
    try:
        files = sorted(p for p in logs_dir.glob("*.jsonl") if p.is_file())
    except FileNotFoundError:
        files = []

    items = [parse_log_file(fp) for fp in files]
    items.sort(key=lambda s: s.run_date or "", reverse=True)
    return {s.session_id: s for s in items}


def format_summary_table(summaries: dict[str, RunSummary], verbose: bool = False) -> list[str]:
    if not summaries:
        return ["No logs found."]

    rows: list[tuple[str, ...]] = []
    for session_id, s in summaries.items():
        details = ""
        if verbose and s.tool_counts:
            details = "(" + ", ".join(f"{k}: {v}" for k, v in sorted(s.tool_counts.items())) + ")"
        rows.append((
            session_id,
            s.model,
            s.status or ("running" if not s.done else ""),
            str(s.round_trips),
            f"{s.approvals_granted}/{s.approvals_granted + s.approvals_denied}",
            str(len(s.tool_counts)),
            str(s.total_tokens),
            s.run_date,
            details,
        ))

    headers = ("Session", "Model", "Status", "Trips", "Approved", "Tools", "Tokens")
    widths = [max(len(h), max(len(r[i]) for r in rows)) for i, h in enumerate(headers)]

    header_parts = [h.rjust(w) for h, w in zip(headers, widths)] + ["RunDate"]
    if verbose:
        header_parts.append("Tool Calls")

    lines: list[str] = ["  ".join(header_parts)]
    for row in rows:
        parts = [value.rjust(w) for value, w in zip(row[:7], widths)] + [row[7]]
        if verbose and row[8]:
            parts.append(row[8])
        lines.append("  ".join(parts))
    return lines


def format_single_summary(details: LogDetails) -> list[str]:
    """Render a concise multi-line summary for a single session."""
    lines: list[str] = [f"Session: {details.session_id}"]
    if details.model:
        lines.append(f"Model:   {details.model}")
    if details.status:
        lines.append(f"Status:  {details.status}")
    lines.append(f"Round-trips: {details.round_trips}")
    if details.prompt:
        lines.append("Prompt:")
        lines.append(details.prompt)
    for label, names in sorted(details.tools_listed.items()):
        lines.append(f"Tools listed ({label}): {', '.join(names)}")
    if details.tools_used:
        lines.append(f"Tools used: {', '.join(details.tools_used)}")
    if details.approvals:
        lines.append("Approvals:")
        lines.extend(f"  {a}" for a in details.approvals)
    if details.answer:
        lines.append("Answer:")
        lines.append(details.answer)
    return lines
