"""
Example 03: Transactions and Observers

This example groups writes in a TransactionManager and audits them with an observer.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from micro_orm import (
    ConnectionConfig,
    Mapper,
    ObserverData,
    ORMSubject,
    Repository,
    TransactionManager,
)


@dataclass
class Account:
    id: Optional[int] = None
    owner: Optional[str] = None
    balance: Optional[float] = None


class BalanceAudit:
    """Prints every write on the accounts table"""

    observed_table = "accounts"

    def process(self, observer_data: ObserverData):
        print(
            f"  [audit] {observer_data.event.value}: "
            f"{observer_data.old_data} -> {observer_data.data}"
        )


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    manager = TransactionManager()
    driver = manager.add_connection(ConnectionConfig(driver="sqlite", database=db_path))
    driver.execute(
        "CREATE TABLE accounts (id INTEGER PRIMARY KEY AUTOINCREMENT, owner TEXT, balance REAL)"
    )

    subject = ORMSubject()
    subject.add_observer(BalanceAudit())
    accounts = Repository(driver, Mapper(Account, "accounts", "id"), subject)

    print("=== Transactions and Observers ===\n")

    print("1. Committed transaction:")
    with manager:
        alice = accounts.save(Account(owner="Alice", balance=100.0))
        bob = accounts.save(Account(owner="Bob", balance=50.0))

    print("\n2. Rolled back transaction:")
    try:
        with manager:
            alice.balance -= 500
            accounts.save(alice)
            if alice.balance < 0:
                raise ValueError("insufficient funds")
    except ValueError as e:
        print(f"  Rolled back: {e}")

    print(f"\nAlice after rollback: {accounts.get(alice.id)}")
    print(f"Bob: {accounts.get(bob.id)}")

    manager.destroy()
    driver.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
