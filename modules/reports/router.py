from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import get_current_user
from core.settings import Settings, get_settings
from modules.reports.excel import build_report_excel
from modules.reports.service import ReportService

router = APIRouter(prefix="/api/reports", tags=["reports"], dependencies=[Depends(get_current_user)])


def get_report_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> ReportService:
    return ReportService(db, settings)


@router.get("/parts-timestamp")
def parts_timestamp_report(reports: ReportService = Depends(get_report_service)):
    return reports.parts_timestamp()


@router.get("/products-timestamp")
def products_timestamp_report(reports: ReportService = Depends(get_report_service)):
    return reports.products_timestamp()


@router.get("/low-stock")
def low_stock_report(reports: ReportService = Depends(get_report_service)):
    return reports.low_stock()


@router.get("/parts-by-type")
def parts_by_type_report(reports: ReportService = Depends(get_report_service)):
    return reports.parts_by_type()


@router.get("/product-parts-association")
def product_parts_association_report(reports: ReportService = Depends(get_report_service)):
    return reports.product_parts_association()


@router.get("/{report_name}/excel")
def download_report_excel(report_name: str, reports: ReportService = Depends(get_report_service)):
    data, columns, rows = reports.table(report_name)
    stream = build_report_excel(data, columns, rows)
    filename = f"{report_name}.xlsx"
    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
