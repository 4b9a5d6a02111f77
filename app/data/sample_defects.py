"""
Sample Defects
Demonstration defect set loadable without an upload.
"""
from app.models.defect_record import DefectRecord

SAMPLE_SOURCE_NAME = "sample-defects"

SAMPLE_DEFECTS: list[DefectRecord] = [
    DefectRecord(
        id="BUG-001",
        subject="Login fails when email contains special characters",
        description="Users with emails containing '+' or '.' before @ cannot login to the system.",
        steps_to_reproduce="1. Navigate to login page\n2. Enter email with '+' character\n3. Enter password\n4. Click login",
        actual_result="Error message: 'Invalid email format'",
        expected_result="User should be able to log in successfully",
        feature_tag="Authentication",
        bug_origin="Production",
        test_case_id="TC-AUTH-103",
    ),
    DefectRecord(
        id="BUG-002",
        subject="Profile picture upload fails for large images",
        description="When uploading profile pictures larger than 2MB, the upload fails with no error message.",
        steps_to_reproduce="1. Go to profile page\n2. Click 'Change Picture'\n3. Select an image larger than 2MB",
        actual_result="Upload spinner keeps spinning indefinitely",
        expected_result="Error message should inform user about file size limitations",
        feature_tag="User Profile",
        bug_origin="UAT",
        test_case_id="TC-PROF-205",
    ),
    DefectRecord(
        id="BUG-003",
        subject="Dashboard data doesn't refresh automatically",
        description="Dashboard statistics are not updated in real-time as specified in requirements.",
        steps_to_reproduce="1. Login to system\n2. Navigate to dashboard\n3. Make changes in another tab\n4. Return to dashboard",
        actual_result="Data remains unchanged until manual refresh",
        expected_result="Dashboard should update automatically every 30 seconds",
        feature_tag="Dashboard",
        bug_origin="Development",
        test_case_id="TC-DASH-118",
    ),
    DefectRecord(
        id="BUG-004",
        subject="Pagination breaks on search results page",
        description="When searching with certain filters, pagination doesn't work correctly.",
        steps_to_reproduce="1. Go to search page\n2. Apply category and date filters\n3. Search for 'test'\n4. Try to go to page 2",
        actual_result="Page reloads but shows same results from page 1",
        expected_result="Page 2 of search results should be displayed",
        feature_tag="Search",
        bug_origin="UAT",
        test_case_id="TC-SRCH-312",
    ),
    DefectRecord(
        id="BUG-005",
        subject="Permission error when accessing admin section after password reset",
        description="After resetting password, admin users lose their permissions temporarily.",
        steps_to_reproduce="1. Trigger password reset for admin account\n2. Set new password\n3. Try to access admin section",
        actual_result="Error: 'You don't have permission to access this page'",
        expected_result="Admin user should retain all permissions after password reset",
        feature_tag="Authentication",
        bug_origin="Production",
        test_case_id="TC-AUTH-217",
    ),
    DefectRecord(
        id="BUG-006",
        subject="Report export creates corrupt Excel file",
        description="When exporting a report with more than 1000 rows, the resulting Excel file is corrupted.",
        steps_to_reproduce="1. Go to reports section\n2. Generate a report with >1000 items\n3. Click 'Export to Excel'",
        actual_result="Excel reports error when opening file",
        expected_result="Valid Excel file should be downloaded",
        feature_tag="Reporting",
        bug_origin="UAT",
        test_case_id="TC-RPT-089",
    ),
    DefectRecord(
        id="BUG-007",
        subject="Error 500 when submitting form with emoji in text field",
        description="Server error occurs when submitting any form with emoji characters.",
        steps_to_reproduce="1. Go to feedback form\n2. Enter text with emoji\n3. Submit form",
        actual_result="Server responds with 500 error",
        expected_result="Form should be submitted successfully or show valid error",
        feature_tag="Forms",
        bug_origin="Production",
        test_case_id="TC-FORM-044",
    ),
]
