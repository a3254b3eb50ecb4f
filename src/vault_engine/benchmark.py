"""
Vault Engine Benchmark CLI.

Usage:
    vault-engine-benchmark [RECORDS]

Or run directly:
    python -m vault_engine.benchmark [RECORDS]

The record count falls back to VAULT_ENGINE_BENCH_RECORDS (environment or
.env file), then to 250.
"""

from __future__ import annotations

import os
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv

from vault_engine.crypto import AeadCipher
from vault_engine.kdf import derive, generate_salt
from vault_engine.records import LoginRecord
from vault_engine.secret_buffer import SecretBuffer
from vault_engine.service import VaultService

DEFAULT_RECORDS = 250


def _banner(title: str) -> None:
    print("+" + "-" * 68 + "+")
    print(f"|  {title}".ljust(69) + "|")
    print("+" + "-" * 68 + "+")


def _rate(count: int, seconds: float) -> str:
    return f"{count / seconds:.2f}" if seconds > 0 else "inf"


def _record_count(argv: List[str]) -> int:
    raw = argv[0] if argv else os.environ.get("VAULT_ENGINE_BENCH_RECORDS")
    if not raw:
        return DEFAULT_RECORDS
    try:
        count = int(raw)
    except ValueError:
        print(f"ERROR: record count must be an integer, got {raw!r}")
        sys.exit(1)
    if count <= 0:
        print("ERROR: record count must be positive")
        sys.exit(1)
    return count


def run_benchmark(record_count: int) -> None:
    """Run the vault engine benchmark over `record_count` synthetic logins."""
    print("=== Vault Engine Benchmark ===\n")
    print(f"Testing with {record_count} records\n")

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    # ========================================================================
    # Demo 1: Key derivation
    # ========================================================================
    _banner("Demo 1: Argon2id Root Key Derivation")

    salt = generate_salt()
    derive_start = time.perf_counter()
    pair = derive("correct horse battery staple", salt)
    derive_time = time.perf_counter() - derive_start
    pair.auth_key.wipe()

    print("[OK] Root key pair derived")
    print(f"[PERF] Time: {derive_time * 1000:.3f}ms\n")

    # ========================================================================
    # Demo 2: Raw AEAD seal/open
    # ========================================================================
    _banner("Demo 2: AES-256-GCM Seal/Open")

    plaintext = b"Sensitive data protected by envelope encryption"
    seal_start = time.perf_counter()
    sealed = AeadCipher.seal(plaintext, pair.encryption_key)
    seal_time = time.perf_counter() - seal_start

    open_start = time.perf_counter()
    AeadCipher.open(sealed, pair.encryption_key)
    open_time = time.perf_counter() - open_start

    print("[OK] Data sealed/opened successfully")
    print(f"[PERF] Seal: {seal_time * 1000:.3f}ms ({_rate(1, seal_time)} ops/sec)")
    print(f"[PERF] Open: {open_time * 1000:.3f}ms ({_rate(1, open_time)} ops/sec)\n")

    # ========================================================================
    # Demo 3: Record encryption
    # ========================================================================
    _banner(f"Demo 3: Encrypt/Decrypt {record_count} Records")

    with VaultService(pair.encryption_key) as service:
        records = [
            LoginRecord(
                owner_id="benchmark",
                name=f"Site {i}",
                username=f"user{i}@example.com",
                password=f"Bench-Password-{i}!",
                url=f"https://site{i}.example.com",
            )
            for i in range(record_count)
        ]

        encrypt_start = time.perf_counter()
        items = [service.encrypt_item(record) for record in records]
        encrypt_duration = time.perf_counter() - encrypt_start

        decrypt_start = time.perf_counter()
        service.decrypt_items(items)
        decrypt_duration = time.perf_counter() - decrypt_start

        print(f"[OK] {record_count} records round-tripped")
        print(f"[PERF] Encrypt: {encrypt_duration * 1000:.3f}ms | Rate: {_rate(record_count, encrypt_duration)} ops/sec")
        print(f"[PERF] Decrypt: {decrypt_duration * 1000:.3f}ms | Rate: {_rate(record_count, decrypt_duration)} ops/sec\n")

        # ====================================================================
        # Demo 4: Re-keying
        # ====================================================================
        _banner(f"Demo 4: Re-key {record_count} Records")

        with SecretBuffer.generate(32) as new_key:
            rekey_start = time.perf_counter()
            service.rekey_all(new_key, items)
            rekey_duration = time.perf_counter() - rekey_start

        print("[OK] Re-key complete (payload ciphertext untouched)")
        print(f"[PERF] Time: {rekey_duration * 1000:.3f}ms | Rate: {_rate(record_count, rekey_duration)} ops/sec\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("+- Performance Summary ----------------------------------------------+")
    rows = [
        ("Key Derivation:", f"{derive_time * 1000:.3f} ms"),
        ("Record Encryption:", f"{_rate(record_count, encrypt_duration)} ops/sec"),
        ("Record Decryption:", f"{_rate(record_count, decrypt_duration)} ops/sec"),
        ("Re-keying:", f"{_rate(record_count, rekey_duration)} ops/sec"),
    ]
    for label, value in rows:
        print(f"|  {label:<20}{value}".ljust(69) + "|")
    print("+--------------------------------------------------------------------+")

    print("\nTest Configuration:")
    print(f"  - Records: {record_count}")
    print("  - KDF: Argon2id (t=3, m=64 MiB, p=4)")
    print("  - Crypto: AES-256-GCM with AEAD, per-record keys")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for the vault-engine-benchmark command."""
    load_dotenv()
    args = sys.argv[1:] if argv is None else argv
    run_benchmark(_record_count(args))


if __name__ == "__main__":
    main()
