from django.urls import path

from .api.views import AttendanceListView, AttendanceSummaryView, ClearAttendanceView, UniqueAttendanceListView

app_name = "attendance"

urlpatterns = [
    path("attendances/", AttendanceListView.as_view(), name="attendance-list"),
    path("attendances/summary/", AttendanceSummaryView.as_view(), name="attendance-summary"),
    path("attendances/clear/", ClearAttendanceView.as_view(), name="attendance-clear"),
    path("attendances-unique/", UniqueAttendanceListView.as_view(), name="attendance-unique"),
]
