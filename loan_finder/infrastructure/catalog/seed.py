"""Default loan products offered by Turkish banks"""

from typing import List

from loan_finder.domain.models import Bank, Loan
from loan_finder.domain.value_objects import InterestRate, LoanType, Money, Term

BANKS = {
    "is-bankasi": "Türkiye İş Bankası",
    "garanti-bbva": "Garanti BBVA",
    "ziraat-bankasi": "Ziraat Bankası",
    "akbank": "Akbank",
    "yapi-kredi": "Yapı Kredi",
    "vakifbank": "VakıfBank",
    "halkbank": "Halkbank",
}

# (id, bank id, type, annual rate %, min amount, max amount, max term months, note)
PRODUCTS = [
    ("konut-001", "is-bankasi", LoanType.HOUSING, 1.89, 100_000, 10_000_000, 360, "Maaş promosyonu ile %1.89 faiz oranı"),
    ("konut-002", "garanti-bbva", LoanType.HOUSING, 1.95, 150_000, 8_000_000, 360, "Bonus Card sahipleri için özel faiz oranı"),
    ("konut-003", "ziraat-bankasi", LoanType.HOUSING, 1.99, 50_000, 15_000_000, 360, "Devlet destekli konut kredisi imkanı"),
    ("konut-004", "akbank", LoanType.HOUSING, 2.15, 100_000, 12_000_000, 360, "Yeni müşteriler için özel kampanya"),
    ("ihtiyac-001", "is-bankasi", LoanType.PERSONAL, 3.99, 5_000, 500_000, 60, "Maaşını bizden alan müşteriler için"),
    ("ihtiyac-002", "yapi-kredi", LoanType.PERSONAL, 4.25, 10_000, 750_000, 60, "World Card sahipleri özel faiz"),
    ("ihtiyac-003", "garanti-bbva", LoanType.PERSONAL, 4.15, 5_000, 600_000, 60, "Dijital başvuru ile hızlı onay"),
    ("tasit-001", "vakifbank", LoanType.VEHICLE, 2.89, 50_000, 3_000_000, 60, "Sıfır araç için özel faiz oranı"),
    ("tasit-002", "halkbank", LoanType.VEHICLE, 3.15, 25_000, 2_500_000, 60, "İkinci el araç kredisi imkanı"),
    ("tasit-003", "akbank", LoanType.VEHICLE, 2.95, 40_000, 3_500_000, 60, "Hibrit/elektrikli araçlar için özel oran"),
]


def seed_catalog(currency: str = "TRY") -> List[Loan]:
    """Build the default product list; loans of the same bank share one Bank instance"""
    banks = {bank_id: Bank(id=bank_id, name=name) for bank_id, name in BANKS.items()}
    return [
        Loan(
            id=loan_id,
            bank=banks[bank_id],
            type=loan_type,
            interest_rate=InterestRate(rate),
            min_amount=Money.of(min_amount, currency),
            max_amount=Money.of(max_amount, currency),
            max_term=Term(max_term),
            eligibility_note=note,
        )
        for loan_id, bank_id, loan_type, rate, min_amount, max_amount, max_term, note in PRODUCTS
    ]
