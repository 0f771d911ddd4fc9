"""The ``rcli`` command line: csv, genpass, base64, text and http tools."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path

from .b64 import Base64Format, decode_base64, encode_base64
from .csvconv import OutputFormat, convert_csv
from .genpass import LOWER, NUMBER, SYMBOL, UPPER, generate_password
from .http_server import DEFAULT_PORT, serve_directory
from .inputs import STDIN
from .text import (
    TextSignFormat,
    decrypt_text,
    encrypt_text,
    generate_key,
    sign_text,
    verify_text,
)


def verify_file(file_name: str) -> str:
    """Accept ``-`` or the name of an existing file."""
    if file_name == STDIN or Path(file_name).exists():
        return file_name
    raise argparse.ArgumentTypeError("File does not exist")


def verify_path(path: str) -> Path:
    """Accept the name of an existing directory."""
    candidate = Path(path)
    if candidate.is_dir():
        return candidate
    raise argparse.ArgumentTypeError("File does not exist or is not a directory")


def _parsed_by(parse):
    def convert(value: str):
        try:
            return parse(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None

    return convert


def _strength_score(password: str) -> int:
    """Rough 0-4 strength score from the size of the guess space."""
    pool = sum(
        len(group)
        for group in (UPPER, LOWER, NUMBER, SYMBOL)
        if any(char in group for char in password)
    )
    if not pool or not password:
        return 0
    log_guesses = len(password) * math.log10(pool)
    return sum(log_guesses >= threshold for threshold in (3, 6, 8, 10))


def _run_csv(args: argparse.Namespace) -> None:
    output = args.output or f"rcli/output.{args.format}"
    convert_csv(args.input, output, args.delimiter, args.format)


def _run_genpass(args: argparse.Namespace) -> None:
    password = generate_password(
        args.length, args.uppercase, args.lowercase, args.numbers, args.symbol
    )
    print(password)
    print(f"Password strength: {_strength_score(password)}", file=sys.stderr)


def _run_base64_encode(args: argparse.Namespace) -> None:
    print(encode_base64(args.input, args.format))


def _run_base64_decode(args: argparse.Namespace) -> None:
    print(decode_base64(args.input, args.format).decode("utf-8"))


def _run_text_sign(args: argparse.Namespace) -> None:
    print(sign_text(args.input, args.key, args.format))


def _run_text_verify(args: argparse.Namespace) -> None:
    verified = verify_text(args.input, args.key, args.sig, args.format)
    print("true" if verified else "false")


def _run_text_generate(args: argparse.Namespace) -> None:
    generate_key(args.format, args.output)


def _run_text_encrypt(args: argparse.Namespace) -> None:
    print(encrypt_text(args.input, args.key, args.nonce))


def _run_text_decrypt(args: argparse.Namespace) -> None:
    plaintext = decrypt_text(args.key, args.nonce, args.sig)
    print(plaintext.decode("utf-8", errors="replace"))


def _run_http_server(args: argparse.Namespace) -> None:
    serve_directory(args.path, args.port)


def _add_input(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-i", "--input", type=verify_file, default=STDIN)


def _add_text_format(parser: argparse.ArgumentParser, *flags: str) -> None:
    parser.add_argument(
        *flags,
        "--format",
        type=_parsed_by(TextSignFormat.parse),
        default=TextSignFormat.BLAKE3,
    )


def _add_csv(commands) -> None:
    parser = commands.add_parser("csv", help="Show CSV orConvert CSV to other formats")
    parser.add_argument("-i", "--input", type=verify_file, required=True)
    parser.add_argument("-o", "--output")
    parser.add_argument(
        "--format", type=_parsed_by(OutputFormat.parse), default=OutputFormat.JSON
    )
    parser.add_argument("-d", "--delimiter", default=" ")
    parser.add_argument("--header", action="store_true", default=True)
    parser.set_defaults(handler=_run_csv)


def _add_genpass(commands) -> None:
    parser = commands.add_parser("genpass", help="Generate a random password")
    parser.add_argument("-l", "--length", type=int, default=16)
    for name in ("uppercase", "lowercase", "numbers", "symbol"):
        parser.add_argument(
            f"--{name}", action=argparse.BooleanOptionalAction, default=True
        )
    parser.set_defaults(handler=_run_genpass)


def _add_base64(commands) -> None:
    group = commands.add_parser("base64", help="Base64 encode/decode")
    sub = group.add_subparsers(dest="base64_command", required=True)
    for name, about, handler in (
        ("encode", "Encode a string to base64", _run_base64_encode),
        ("decode", "Decode a base64 to string", _run_base64_decode),
    ):
        parser = sub.add_parser(name, help=about)
        _add_input(parser)
        parser.add_argument(
            "--format",
            type=_parsed_by(Base64Format.parse),
            default=Base64Format.STANDARD,
        )
        parser.set_defaults(handler=handler)


def _add_text(commands) -> None:
    group = commands.add_parser("text", help="Text sign/verify")
    sub = group.add_subparsers(dest="text_command", required=True)

    sign = sub.add_parser("sign", help="Sign a message with a private/shared key")
    _add_input(sign)
    sign.add_argument("-k", "--key", type=verify_file, required=True)
    _add_text_format(sign)
    sign.set_defaults(handler=_run_text_sign)

    verify = sub.add_parser("verify", help="Verify a signed message")
    _add_input(verify)
    verify.add_argument("-k", "--key", type=verify_file, required=True)
    verify.add_argument("-s", "--sig", required=True)
    _add_text_format(verify)
    verify.set_defaults(handler=_run_text_verify)

    generate = sub.add_parser("generate", help="Generate a new key")
    _add_text_format(generate, "-f")
    generate.add_argument("-o", "--output", type=verify_path, required=True)
    generate.set_defaults(handler=_run_text_generate)

    encrypt = sub.add_parser("encrypt", help="Encrypt a text")
    _add_input(encrypt)
    encrypt.add_argument("-k", "--key", type=verify_file, required=True)
    encrypt.add_argument("-n", "--nonce", required=True)
    encrypt.set_defaults(handler=_run_text_encrypt)

    decrypt = sub.add_parser("decrypt", help="Decrypt a text")
    _add_input(decrypt)
    decrypt.add_argument("-k", "--key", type=verify_file, required=True)
    decrypt.add_argument("-n", "--nonce", required=True)
    decrypt.add_argument("-s", "--sig", required=True)
    decrypt.set_defaults(handler=_run_text_decrypt)


def _add_http(commands) -> None:
    group = commands.add_parser("http", help="HTTP server")
    sub = group.add_subparsers(dest="http_command", required=True)
    server = sub.add_parser("server", help="Server a directory over HTTP")
    server.add_argument("--path", type=verify_path, default=".")
    server.add_argument("--port", type=int, default=DEFAULT_PORT)
    server.set_defaults(handler=_run_http_server)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the ``rcli`` command."""
    parser = argparse.ArgumentParser(prog="rcli")
    commands = parser.add_subparsers(dest="command", required=True)
    _add_csv(commands)
    _add_genpass(commands)
    _add_base64(commands)
    _add_text(commands)
    _add_http(commands)
    return parser


def main(argv=None) -> int:
    """Run ``rcli`` with ``argv`` and return the exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        args.handler(args)
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0