#!/usr/bin/env python3
"""
LVGL Wrapper Generator

Parses the bindgen output for lvgl-sys and generates the Rust widget
wrappers (one `define_object!` type plus builder methods per widget).

Usage:
    python generate_bindings.py bindings.rs --output generated/widgets.rs
    python generate_bindings.py bindings.rs --list-functions
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add parent directory to path so lvglgen package can be found
sys.path.insert(0, str(Path(__file__).parent.parent))

from lvglgen import CodeGen, ParseError


def main(argv=None):
    start_time = time.perf_counter()

    parser = argparse.ArgumentParser(description="Generate LVGL widget wrappers from bindgen output")
    parser.add_argument("bindings_file", help="Path to the bindgen-generated Rust file")
    parser.add_argument("--output", "-o", default="", help="Output file (stdout if omitted)")
    parser.add_argument("--prefix", default="lv_", help="Library function prefix")
    parser.add_argument("--sys-crate", default="lvgl_sys", help="Crate holding the raw bindings")
    parser.add_argument("--list-functions", action="store_true", help="Print loaded function names and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every decision")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log errors")
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    bindings_path = Path(args.bindings_file)
    try:
        source = bindings_path.read_text()
    except OSError as e:
        logging.error("Cannot read %s: %s", bindings_path, e)
        return 1

    try:
        codegen = CodeGen.from_source(source, args.prefix)
    except ParseError as e:
        logging.error("%s: %s", bindings_path, e)
        return 1

    if args.list_functions:
        for name in codegen.function_names():
            print(name)
        return 0

    module = codegen.generate_module(args.sys_crate)
    if not args.output:
        sys.stdout.write(module)
        return 0

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(module)
    print(f"Generated: {output_path}")

    elapsed = time.perf_counter() - start_time
    print(f"Generation completed in {elapsed*1000:.2f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
