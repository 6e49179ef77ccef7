"""Field-service work-order coordination: work orders, technicians, assignment."""

__version__ = "0.1.0"
