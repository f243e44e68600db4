"""Permit exports: the monthly recap (CSV / Excel) and the printable letter."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import format_long_date_id, format_month_id, parse_month
from ..core.constants import EMPTY_TIME, NON_PRINTABLE_PERMIT_STATUSES
from ..core.exceptions import ValidationError
from .model import LeavePermit

RECAP_COLUMNS = ["Nama Pegawai", "Tanggal", "Waktu Keluar", "Waktu Kembali", "Keperluan", "Status"]
TIME_ZONE_LABEL = "WIT"


class PermitRecapExporter:
    """Monthly recap table. Leave time shows the actual time when known."""

    def __init__(self, permits: Sequence[LeavePermit], month: str):
        year, mon = parse_month(month)
        self.month = month
        self.title = "Laporan Rekapitulasi Izin Keluar"
        self.period = f"Periode: {format_month_id(year, mon)}"
        self._permits = list(permits)

    def __len__(self) -> int:
        return len(self._permits)

    def to_rows(self) -> list[dict]:
        if not self._permits:
            raise ValidationError("Tidak ada data untuk diekspor.")
        return [
            {
                "Nama Pegawai": p.employee_name,
                "Tanggal": format_long_date_id(p.date),
                "Waktu Keluar": p.actual_leave_time or p.leave_time,
                "Waktu Kembali": p.actual_return_time or EMPTY_TIME,
                "Keperluan": p.purpose,
                "Status": p.status.value,
            }
            for p in self._permits
        ]

    def to_csv(self) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=RECAP_COLUMNS)
        writer.writeheader()
        for row in self.to_rows():
            writer.writerow(row)
        # BOM so spreadsheet apps pick up UTF-8
        return out.getvalue().encode("utf-8-sig")

    def to_excel(self) -> bytes:
        df = pd.DataFrame(self.to_rows(), columns=RECAP_COLUMNS)
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Rekap Izin", startrow=2)
            sheet = writer.sheets["Rekap Izin"]
            sheet["A1"] = self.title
            sheet["A2"] = self.period
        return output.getvalue()

    @property
    def filename_stem(self) -> str:
        return f"Rekap_Izin_Keluar_{self.month}"


@dataclass(frozen=True)
class SignatureBlock:
    caption: str
    name: str
    title: Optional[str] = None


@dataclass(frozen=True)
class PermitDocument:
    """Printable "Surat Izin Meninggalkan Kantor" for one permit."""

    header: Sequence[str]
    employee_name: str
    permit_date: str
    long_date: str
    leave_time: str
    purpose: str
    signatures: Sequence[SignatureBlock]
    monitor_rows: Sequence[tuple[str, str]] = field(default_factory=tuple)
    title: str = "SURAT IZIN MENINGGALKAN KANTOR"

    @property
    def filename(self) -> str:
        return f"Surat_Izin_Keluar_{self.employee_name}_{self.permit_date}"

    def render_text(self) -> str:
        lines: list[str] = list(self.header)
        lines += ["", self.title.center(60), ("-" * len(self.title)).center(60), ""]
        for label, value in (
            ("Nama", self.employee_name),
            ("Hari, Tanggal", self.long_date),
            ("Waktu Pergi", self.leave_time),
            ("Keperluan", self.purpose),
        ):
            lines.append(f"{label:<15}: {value}")
        lines.append("")
        for block in self.signatures:
            lines.append(block.caption)
            if block.title:
                lines.append(block.title)
            lines += ["", "", block.name, "-" * max(len(block.name), 20), ""]
        lines.append("MONITOR SECURITY")
        for label, value in self.monitor_rows:
            lines.append(f"{label:<15}: {value}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "header": list(self.header),
            "employeeName": self.employee_name,
            "date": self.long_date,
            "leaveTime": self.leave_time,
            "purpose": self.purpose,
            "signatures": [{"caption": s.caption, "name": s.name, "title": s.title} for s in self.signatures],
            "monitor": [{"label": label, "value": value} for label, value in self.monitor_rows],
        }


def _monitor_value(value: Optional[str]) -> str:
    return f"{value} {TIME_ZONE_LABEL}" if value else f"................... {TIME_ZONE_LABEL}"


def build_permit_document(
    permit: LeavePermit,
    *,
    header: Iterable[str] = (),
    approver_title: str = "Manager",
    approver_name: str = "",
) -> PermitDocument:
    """Printable letter; only permits past the approval step can be printed."""

    if not is_printable(permit):
        raise ValidationError("Surat izin hanya dapat dicetak setelah disetujui")

    return PermitDocument(
        header=tuple(header),
        employee_name=permit.employee_name,
        permit_date=permit.date.isoformat(),
        long_date=format_long_date_id(permit.date),
        leave_time=f"{permit.leave_time} {TIME_ZONE_LABEL}",
        purpose=permit.purpose,
        signatures=(
            SignatureBlock(caption="Yang Mengajukan,", name=permit.employee_name),
            SignatureBlock(caption="Security Jaga,", name=permit.security_on_duty),
            SignatureBlock(caption="Mengetahui,", name=approver_name or "(....................)", title=approver_title),
        ),
        monitor_rows=(
            ("JAM KELUAR", _monitor_value(permit.actual_leave_time)),
            ("JAM KEMBALI", _monitor_value(permit.actual_return_time)),
        ),
    )


def is_printable(permit: LeavePermit) -> bool:
    return permit.status not in NON_PRINTABLE_PERMIT_STATUSES
