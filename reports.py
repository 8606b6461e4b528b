# reports.py
import io
import logging
import zipfile
from datetime import date

import plotly.io as pio

from analytics import history_frame
from progress import BADGES

logger = logging.getLogger(__name__)


def history_csv(entries) -> bytes:
    df = history_frame(entries)
    if not df.empty:
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")
    return df.to_csv(index=False).encode("utf-8")


def report_text(result, badges, recommendations, start=None, end=None, today=None) -> str:
    """Plain-text footprint report: breakdown, achievements and tips."""
    today = today or date.today()
    if start and end:
        header = f"Report: {start.isoformat()} to {end.isoformat()}"
    else:
        header = f"Report Date: {today.isoformat()}"

    lines = ["Personal Carbon Footprint Tracker", header, "", "Emissions Breakdown"]
    if result is None:
        lines.append("No footprint calculated yet.")
    else:
        lines += [
            f"Travel: {result.travel:.1f} kg CO2",
            f"Diet: {result.diet:.1f} kg CO2",
            f"Shopping: {result.shopping:.1f} kg CO2",
            f"Total: {result.total:.1f} kg CO2",
        ]

    lines += ["", "Achievements"]
    earned = [b for b in BADGES if badges.get(b["id"])]
    if earned:
        lines += [f"{b['icon']} {b['title']}" for b in earned]
    else:
        lines.append("No badges earned yet.")

    lines += ["", "Personalised Recommendations"]
    lines += [f"- {rec}" for rec in recommendations] or ["- Keep up the good work!"]
    lines += ["", "Generated by Personal Carbon Footprint Tracker"]
    return "\n".join(lines) + "\n"


def report_zip(entries, text, figures=None) -> bytes:
    """ZIP with the history CSV, the text report and any chart PNGs."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, 'w') as z:
        z.writestr("history.csv", history_csv(entries).decode("utf-8"))
        z.writestr("report.txt", text)
        for name, fig in (figures or {}).items():
            try:
                z.writestr(name, pio.to_image(fig, format='png'))
            except (ValueError, RuntimeError) as e:
                # static export needs kaleido; the CSV and text are still useful
                logger.warning("Could not render %s: %s", name, e)
    buf.seek(0)
    return buf.getvalue()
