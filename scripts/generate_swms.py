#!/usr/bin/env python3
# scripts/generate_swms.py
import argparse, sys, json, logging
from pathlib import Path

# Ensure project root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from swms.config import get_config
from swms.pipeline import generate_swms_sync


def main():
    parser = argparse.ArgumentParser(
        description="Generate SWMS risk assessments for a trade and its work activities."
    )
    parser.add_argument("--trade", required=True, help="Trade type, e.g. 'Tiling & Waterproofing'")
    parser.add_argument("--activity", action="append", default=[],
                        help="Selected work activity (repeatable)")
    parser.add_argument("--description", default=None, help="Plain-text job description")
    parser.add_argument("--state", default=None, help="Australian state or territory (default from config)")
    parser.add_argument("--site", default="Commercial", help="Site environment (default: Commercial)")
    parser.add_argument("--hrcw", type=int, nargs="*", default=[], help="Selected HRCW category numbers (1-18)")
    parser.add_argument("--use-llm", action="store_true", help="Try AI generation (needs OPENAI_API_KEY)")
    parser.add_argument("--out", type=str, default=None, help="Write the document JSON to this file")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = get_config()
    if args.use_llm:
        cfg["use_llm"] = True

    request = {
        "trade_type": args.trade,
        "selected_activities": args.activity,
        "plain_text_description": args.description,
        "project_details": {
            "state": args.state or cfg["default_state"],
            "site_environment": args.site,
            "hrcw_categories": args.hrcw,
        },
    }
    doc = generate_swms_sync(request, config=cfg)

    print(f"[SWMS] source={doc.source} assessments={len(doc.risk_assessments)} "
          f"activities={len(doc.activities)} compliance_codes={len(doc.compliance_codes)}")
    for ra in doc.risk_assessments:
        hrcw = f" HRCW={ra.hrcw_references}" if ra.hrcw_references else ""
        print(f"  - [{ra.origin}] {ra.activity} ({ra.risk_level} -> {ra.residual_risk_level}){hrcw}")
    for w in doc.warnings:
        print(f"[WARN] {w}")

    payload = json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)
    if args.out:
        Path(args.out).write_text(payload, encoding="utf-8")
        print(f"[SWMS] wrote {args.out}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
