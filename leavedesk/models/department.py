"""
Department catalogue.
Departments are a fixed set of codes rather than a table; the labels are what
the pickers show.
"""
import enum


class Department(str, enum.Enum):
    HR = "HR"
    IT = "IT"
    FINANCE = "Finance"
    MARKETING = "Marketing"
    OPERATIONS = "Operations"
    SALES = "Sales"

    @property
    def label(self) -> str:
        return DEPARTMENT_LABELS[self]

    @classmethod
    def from_code(cls, code):
        """Returns the matching member, or None for unknown/empty codes."""
        try:
            return cls(code)
        except ValueError:
            return None


DEPARTMENT_LABELS = {
    Department.HR: "Human Resources",
    Department.IT: "Information Technology",
    Department.FINANCE: "Finance",
    Department.MARKETING: "Marketing",
    Department.OPERATIONS: "Operations",
    Department.SALES: "Sales",
}
