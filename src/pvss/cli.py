"""
CLI application for Pedersen verifiable secret sharing.

Commands:
    split          Split a secret into word-phrase shares
    verify         Check shares against their commitments
    reconstruct    Recover the secret from threshold or more shares
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from .core.keystore import ShareStore
from .core.vss import PedersenVSS, Share
from .crypto.errors import PVSSError


app = typer.Typer(
    name="pvss", help="Pedersen verifiable secret sharing with word-phrase shares"
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug output to stderr"
    ),
) -> None:
    """Split, verify and reconstruct secrets."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def collect_shares(
    files: Optional[List[Path]], store_dir: Optional[Path]
) -> list[Share]:
    """Load shares from explicit files, or from every file in the store."""
    if files:
        return [ShareStore.load_share(path) for path in files]
    if store_dir is not None:
        return ShareStore(store_dir).load_shares()

    typer.echo("Error: Give share files or --store.", err=True)
    raise typer.Exit(1)


@app.command()
def split(
    secret: Optional[str] = typer.Argument(
        None, help="Secret to split (prompted for when omitted)"
    ),
    num_shares: int = typer.Option(
        ..., "--shares", "-n", help="Total number of shares"
    ),
    threshold: int = typer.Option(
        ..., "--threshold", "-t", help="Shares needed to reconstruct"
    ),
    store_dir: Optional[Path] = typer.Option(
        None, "--store", "-s", envvar="PVSS_STORE", help="Directory to save shares"
    ),
) -> None:
    """
    Split a secret into shares.

    Without --store the shares are printed, one Key / KeyCheck pair each.

    Example:
        pvss split -n 5 -t 3 -s ./shares
    """
    if secret is None:
        secret = typer.prompt("Secret", hide_input=True)

    try:
        shares = PedersenVSS().split_secret(secret, num_shares, threshold)
    except PVSSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if store_dir is not None:
        paths = ShareStore(store_dir).save_shares(shares)
        typer.echo(f"Saved {len(paths)} shares to {store_dir} (threshold {threshold})")
        return

    for i, share in enumerate(shares, start=1):
        typer.echo(f"Share {i}:")
        typer.echo(f"  Key:      {share.key}")
        typer.echo(f"  KeyCheck: {share.key_check}")


@app.command()
def verify(
    files: Optional[List[Path]] = typer.Argument(None, help="Share files"),
    store_dir: Optional[Path] = typer.Option(
        None, "--store", "-s", envvar="PVSS_STORE", help="Directory of share files"
    ),
) -> None:
    """
    Verify shares against their commitments.

    Exits with status 1 if any share is invalid or malformed.
    """
    try:
        shares = collect_shares(files, store_dir)
    except (PVSSError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    vss = PedersenVSS()
    all_valid = True

    for i, share in enumerate(shares, start=1):
        try:
            valid = vss.verify_share(share)
        except PVSSError as e:
            typer.echo(f"Share {i}: MALFORMED ({e})")
            all_valid = False
            continue

        typer.echo(f"Share {i}: {'valid' if valid else 'INVALID'}")
        all_valid = all_valid and valid

    if not all_valid:
        raise typer.Exit(1)


@app.command()
def reconstruct(
    files: Optional[List[Path]] = typer.Argument(None, help="Share files"),
    store_dir: Optional[Path] = typer.Option(
        None, "--store", "-s", envvar="PVSS_STORE", help="Directory of share files"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the raw secret to this file"
    ),
) -> None:
    """
    Reconstruct the secret from shares.

    Shares are not verified first; run 'pvss verify' to detect tampering.
    """
    try:
        shares = collect_shares(files, store_dir)
        secret = PedersenVSS().reconstruct_secret(shares)
    except (PVSSError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if output is not None:
        with open(output, "wb") as f:
            f.write(secret)
        typer.echo(f"Secret written: {output}")
        return

    typer.echo(secret.decode("utf-8", errors="replace"))


if __name__ == "__main__":
    app()
