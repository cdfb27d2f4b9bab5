"""CLI tool for admin operations.

Usage:
    python -m backend.cli create-user
    python -m backend.cli stats <username> [starting_balance]
"""

import sys
import getpass

import qrcode
from sqlmodel import Session, select

from backend.api.auth import user_settings
from backend.database import engine, create_db_and_tables
from backend.models.journal_entry import JournalEntry
from backend.models.user import User
from backend.services.auth import hash_password, generate_totp_secret, get_totp_uri
from backend.services.trade_stats import aggregate_trades
from backend.utils.logging import setup_logging


def create_user():
    """Create a journal user with TOTP setup."""
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)

    totp_secret = generate_totp_secret()
    totp_uri = get_totp_uri(totp_secret, username)

    user = User(
        username=username,
        hashed_password=hash_password(password),
        totp_secret=totp_secret,
    )

    with Session(engine) as session:
        session.add(user)
        session.commit()

    print(f"\nUser '{username}' created successfully.")
    print(f"\nTOTP Secret: {totp_secret}")
    print(f"TOTP URI: {totp_uri}")
    print("\nScan the QR code below with your authenticator app:")

    qr = qrcode.QRCode(box_size=1, border=1)
    qr.add_data(totp_uri)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _fmt_ratio(value: float) -> str:
    return "inf" if value == float("inf") else f"{value:.2f}"


def print_stats(username: str, starting_balance: float | None = None):
    """Print a performance summary for one user's trades."""
    create_db_and_tables()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            print(f"User '{username}' not found.")
            sys.exit(1)
        trades = session.exec(
            select(JournalEntry)
            .where(JournalEntry.user_id == user.id)
            .where(JournalEntry.type == "trade")
        ).all()
        prefs = user_settings(user)

    balance = starting_balance if starting_balance is not None else prefs.starting_balance
    stats = aggregate_trades(trades, balance)

    print(f"Trades:        {stats.total_trades} ({stats.wins}W / {stats.losses}L / {stats.breakevens}BE)")
    print(f"Win rate:      {stats.win_rate:.1f}%")
    print(f"Net PnL:       {stats.net_pnl:,.2f} {prefs.currency}")
    print(f"Profit factor: {_fmt_ratio(stats.profit_factor)}")
    print(f"Expectancy:    {stats.expectancy:,.2f}")
    print(f"Max drawdown:  {stats.max_drawdown:,.2f} ({stats.max_drawdown_percent:.2f}%)")
    print(f"Final equity:  {stats.pnl_curve[-1].cumulative_equity:,.2f}")
    if stats.pair_stats:
        print("\nPair           Trades        PnL   Win%")
        for p in stats.pair_stats:
            print(f"{p.pair:<12} {p.count:>8} {p.pnl:>10,.2f} {p.win_rate:>6.1f}")


def main():
    setup_logging()
    if len(sys.argv) < 2:
        print("Usage: python -m backend.cli <command>")
        print("Commands: create-user, stats <username> [starting_balance]")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "stats" and len(sys.argv) >= 3:
        balance = float(sys.argv[3]) if len(sys.argv) >= 4 else None
        print_stats(sys.argv[2], balance)
    else:
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        sys.exit(1)


if __name__ == "__main__":
    main()
