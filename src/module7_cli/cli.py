#!/usr/bin/env python3
"""
DevTag command-line interface.

Subcommands:
    encode  render a strip, shadow or hierarchy carrier to an image file
    decode  recover exact DevTag records from screenshots
    scan    rank registry components by perceptual correlation (or noise hash)

Examples:
    devtag encode --view-id BILLING_02 --route /settings/billing \\
        --sha abc1234 --width 400 -o strip.png
    devtag decode screenshot.png --registry devtags.registry.json
    devtag encode --carrier hierarchy --path BILLING_PAGE/metadata-panel \\
        --type panel --width 250 -o shadow.png
    devtag scan screenshot.png --components components.yaml --threshold 0.6
    devtag scan screenshot.png --components components.yaml --noise
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

from tqdm import tqdm

from src.module1_image_io import ImageIO, ImageIOError
from src.module2_payload_codec import DevTagFields, HierarchicalFields, PayloadError
from src.module3_bitplane_channel import (
    ChannelError,
    render_hierarchy_shadow,
    render_shadow,
    render_strip,
)
from src.module4_pattern_synthesis import PatternError
from src.module5_correlation import (
    RegistryError,
    build_hash_registry,
    build_registry,
    load_components,
)
from src.module6_image_scanner import ImageScanner, ScannerConfigurationError, load_config

from .registry_lookup import load_registry, lookup


logger = logging.getLogger(__name__)


CARRIERS = {
    'strip': render_strip,
    'shadow': render_shadow,
    'hierarchy': render_hierarchy_shadow,
}


def setup_logging(verbose: bool = False):
    """Configure logging for the command-line tools."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='devtag',
        description='Embed and recover UI provenance in screenshots',
    )
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', type=str, default=None, help='Scanner configuration YAML')

    subparsers = parser.add_subparsers(dest='command', required=True)

    encode = subparsers.add_parser('encode', help='Render a DevTag carrier image')
    encode.add_argument('--view-id', default=None, help='View identifier (strip, shadow)')
    encode.add_argument('--route', default=None, help='Route string (strip, shadow)')
    encode.add_argument('--path', default=None,
                        help='Slash-joined component chain (hierarchy)')
    encode.add_argument('--type', default='component', help='Component type (hierarchy)')
    encode.add_argument('--sha', default='', help='Short git sha (7 chars)')
    encode.add_argument('--flags', type=int, default=0, help='Flags byte (default: 0)')
    encode.add_argument('--timestamp', type=int, default=None,
                        help='Unix seconds (default: now)')
    encode.add_argument('--carrier', choices=sorted(CARRIERS), default='strip',
                        help='Carrier flavour (default: strip)')
    encode.add_argument('--width', type=int, required=True, help='Carrier width in pixels')
    encode.add_argument('-o', '--output', required=True, help='Output image path (.png)')

    decode = subparsers.add_parser('decode', help='Decode exact DevTag records')
    decode.add_argument('images', nargs='+', help='Screenshot files')
    decode.add_argument('--registry', default=None, help='View-id registry JSON')
    decode.add_argument('--json', action='store_true', help='Print results as JSON')

    scan = subparsers.add_parser('scan', help='Perceptual component scan')
    scan.add_argument('images', nargs='+', help='Screenshot files')
    scan.add_argument('--components', required=True, help='Component list (YAML or JSON)')
    scan.add_argument('--threshold', type=float, default=None,
                      help='Correlation threshold (default: from config)')
    scan.add_argument('--tile-size', type=int, default=None,
                      help='Tile size in pixels (default: from config)')
    scan.add_argument('--intensity', type=float, default=None,
                      help='Pattern intensity (default: from config)')
    scan.add_argument('--noise', action='store_true',
                      help='Match hashed noise tiles instead of correlating')
    scan.add_argument('--json', action='store_true', help='Print results as JSON')

    return parser


def _encode_fields(args):
    if args.carrier == 'hierarchy':
        if not args.path:
            raise ValueError("--path is required for the hierarchy carrier")
        return HierarchicalFields.from_chain([part for part in args.path.split('/') if part], args.type)

    if args.view_id is None or args.route is None:
        raise ValueError(f"--view-id and --route are required for the {args.carrier} carrier")
    return DevTagFields(
        view_id=args.view_id,
        route=args.route,
        sha=args.sha,
        flags=args.flags,
        timestamp=args.timestamp,
    )


def cmd_encode(args, io: ImageIO) -> int:
    fields = _encode_fields(args)
    carrier = CARRIERS[args.carrier](fields, args.width)
    io.write_image(carrier, args.output)

    print(f"Wrote {args.carrier} carrier {carrier.shape[1]}x{carrier.shape[0]} to {args.output}")
    return 0


def cmd_decode(args, io: ImageIO, scanner: ImageScanner) -> int:
    registry = load_registry(args.registry) if args.registry else None
    reports = []
    found_any = False

    for path in tqdm(args.images, desc="Decoding", disable=len(args.images) < 2):
        image, _ = io.load_image(path)
        result = scanner.decode_any(image)

        report = {'image': path, **result.to_dict()}
        if result.found:
            found_any = True
            view_id = getattr(result.payload, 'view_id', None)
            report['registry'] = lookup(registry, view_id) if view_id else None
        reports.append(report)

    if args.json:
        print(json.dumps(reports, indent=2))
    else:
        for report in reports:
            _print_decode_report(report)

    return 0 if found_any else 1


def _print_decode_report(report: dict) -> None:
    print(f"\n=== {report['image']} ===")
    if not report['found']:
        print("  No DevTag found in image")
        return

    payload = report['payload']
    print(f"  Channel:     {report['channel']} (row {report['row']}, offset {report['offset']})")
    if report['scheme'] == 'hierarchical':
        print(f"  Path:        {payload['path']}")
        print(f"  Type:        {payload['type']}")
        print(f"  Depth:       {payload['depth']}")
    else:
        print(f"  View ID:     {payload['view_id']}")
        print(f"  Git SHA:     {payload['sha'] or '(none)'}")
        print(f"  Route Hash:  {payload['route_hash_hex']}")
        print(f"  Timestamp:   {format_timestamp(payload['timestamp'])}")
        print(f"  Flags:       {payload['flags']}")
    print(f"  Version:     {payload['version']}")
    print(f"  Checksum:    {'VALID' if payload['checksum_valid'] else 'INVALID'}")

    entry = report.get('registry')
    if entry:
        print("  --- Registry ---")
        print(f"  Route:       {entry.get('route', '')}")
        print(f"  Entry:       {entry.get('entry', '')}")
        for key in ('owners', 'tests'):
            if entry.get(key):
                print(f"  {key.capitalize() + ':':<12} {', '.join(entry[key])}")
        if entry.get('storybook'):
            print(f"  Storybook:   {entry['storybook']}")


def cmd_scan(args, io: ImageIO, scanner: ImageScanner) -> int:
    section = scanner.config['noise' if args.noise else 'perceptual']
    tile_size = args.tile_size or section['tile_size']
    intensity = args.intensity or section['intensity']

    components = load_components(args.components)
    if args.noise:
        registry = build_hash_registry(components, tile_size=tile_size, intensity=intensity)
    else:
        registry = build_registry(
            components,
            tile_size=tile_size,
            intensity=intensity,
            baseline=section['baseline'],
        )

    reports = []
    found_any = False

    for path in tqdm(args.images, desc="Scanning", disable=len(args.images) < 2):
        image, _ = io.load_image(path)
        if args.noise:
            result = scanner.scan_noise(image, registry, tile_size)
        else:
            result = scanner.scan_perceptual(image, registry, args.threshold, tile_size)
        found_any = found_any or result.found
        reports.append({
            'image': path,
            'tiles_visited': result.tiles_visited,
            'matches': [match.to_dict() for match in result.matches],
        })

    if args.json:
        print(json.dumps(reports, indent=2))
    else:
        for report in reports:
            print(f"\n=== {report['image']} ({report['tiles_visited']} tiles) ===")
            if not report['matches']:
                print("  No components matched")
            for match in report['matches']:
                print(
                    f"  {match['path']:<40} {match['type']:<12} depth={match['depth']} "
                    f"tiles={match['count']} max={match['max_score']:.3f} [{match['coverage']}]"
                )

    return 0 if found_any else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``devtag`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    io = ImageIO()
    try:
        if args.command == 'encode':
            return cmd_encode(args, io)

        scanner = ImageScanner(load_config(args.config))
        if args.command == 'decode':
            return cmd_decode(args, io, scanner)
        return cmd_scan(args, io, scanner)

    except (ImageIOError, PayloadError, ChannelError, PatternError,
            RegistryError, ScannerConfigurationError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
