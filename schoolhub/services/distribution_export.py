"""Excel export of the weekly student distribution."""

import io

import pandas as pd

from schoolhub.models import WEEKDAYS
from schoolhub.services.distribution_service import DistributionSnapshot

SLOTS_SHEET = "Distribution"
SUMMARY_SHEET = "Summary"

SLOT_COLUMNS = ["Day", "Student ID", "Student", "Plan", "Days per week", "Locked"]


def distribution_frames(snapshot: DistributionSnapshot) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Slots table (one row per scheduled day) and per-day summary table."""
    slots = [
        {
            "Day": day.value.capitalize(),
            "Student ID": entry.student_id,
            "Student": entry.name,
            "Plan": entry.membership_plan.name,
            "Days per week": entry.membership_plan.days_per_week,
            "Locked": "Yes" if entry.is_locked else "No",
        }
        for day in WEEKDAYS
        for entry in snapshot.day_schedule[day]
    ]
    slots_df = pd.DataFrame(slots, columns=SLOT_COLUMNS)

    summary = [
        {
            "Day": day.value.capitalize(),
            "Students": len(snapshot.day_schedule[day]),
            "Locked": sum(1 for entry in snapshot.day_schedule[day] if entry.is_locked),
        }
        for day in WEEKDAYS
    ]
    summary.append(
        {"Day": "Unallocated", "Students": len(snapshot.unallocated_students), "Locked": 0}
    )
    summary_df = pd.DataFrame(summary, columns=["Day", "Students", "Locked"])
    return slots_df, summary_df


def build_distribution_workbook(snapshot: DistributionSnapshot) -> io.BytesIO:
    """Render the distribution into an in-memory .xlsx file."""
    slots_df, summary_df = distribution_frames(snapshot)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        slots_df.to_excel(writer, sheet_name=SLOTS_SHEET, index=False)
        summary_df.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)

        # Column widths
        worksheet = writer.sheets[SLOTS_SHEET]
        for column in worksheet.columns:
            max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
            worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    output.seek(0)
    return output
