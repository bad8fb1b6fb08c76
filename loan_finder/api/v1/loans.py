"""GET /v1/loans - Catalog listing and amortization schedules"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from loan_finder.api.dependencies import get_catalog
from loan_finder.api.v1.schemas import InstallmentSchema, LoanListResponse, LoanSchema, ScheduleResponse
from loan_finder.domain.catalog import LoanCatalog
from loan_finder.domain.calculation import LoanCalculationService
from loan_finder.domain.exceptions import EligibilityError, ValidationError
from loan_finder.domain.installments import generate_amortization_schedule
from loan_finder.domain.value_objects import LoanType, Money, Term

router = APIRouter()


@router.get("/loans", response_model=LoanListResponse)
def list_loans(
    type: Optional[str] = Query(None, description="Filter by loan type (housing, vehicle, personal or Turkish name)"),
    catalog: LoanCatalog = Depends(get_catalog),
):
    if type is None:
        loans = catalog.find_all()
    else:
        try:
            loans = catalog.find_by_type(LoanType.from_string(type))
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return LoanListResponse(loans=[LoanSchema.from_loan(loan) for loan in loans], total=len(loans))


@router.get("/loans/{loan_id}", response_model=LoanSchema)
def get_loan(loan_id: str, catalog: LoanCatalog = Depends(get_catalog)):
    loan = catalog.find_by_id(loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return LoanSchema.from_loan(loan)


@router.get("/loans/{loan_id}/schedule", response_model=ScheduleResponse)
def get_schedule(
    loan_id: str,
    amount: float = Query(..., gt=0, description="Principal in the loan's currency"),
    term_months: int = Query(..., gt=0, description="Number of monthly installments"),
    catalog: LoanCatalog = Depends(get_catalog),
):
    """
    Month-by-month repayment schedule of one loan.

    Returns:
        422 when the loan does not accept the amount or term
    """
    loan = catalog.find_by_id(loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")

    try:
        money = Money.of(amount, loan.currency)
        term = Term(term_months)
        comparison = LoanCalculationService().compare(loan, money, term)
        installments = generate_amortization_schedule(loan, money, term)
    except (ValidationError, EligibilityError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ScheduleResponse(
        loan_id=loan.id,
        amount=float(money.amount),
        term_months=term.months,
        currency=money.currency,
        monthly_payment=float(comparison.monthly_payment.amount),
        total_payment=float(comparison.total_payment.amount),
        total_interest=float(comparison.total_interest.amount),
        installments=[InstallmentSchema.from_installment(installment) for installment in installments],
    )
