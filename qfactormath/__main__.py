"""
Main entry point for qfactormath.

Reads a factor document (JSON or YAML) with factors, statements and
optional narrative themes, runs the interaction and distinguishing-view
analyses, and writes the results as JSON.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from qfactormath.components.config import ConfigManager, read_config_file
from qfactormath.errors import QFactorMathError
from qfactormath.interpretation import analyze_distinctions, analyze_interactions

logger = logging.getLogger(__name__)


def setup_logging(level: str = 'INFO') -> None:
    """
    Set up logging.

    Args:
        level: Logging level
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description='Q-methodology factor interpretation')

    parser.add_argument(
        'input',
        help='JSON or YAML document with factors, statements and narratives'
    )

    parser.add_argument(
        '--config',
        help='Path to configuration file'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level; defaults to logging.level from the configuration'
    )

    parser.add_argument(
        '--filter-threshold',
        type=float,
        help='Minimum |r| for a relationship edge'
    )

    parser.add_argument(
        '--threshold-level',
        choices=['strict', 'moderate', 'inclusive'],
        help='Cutoff for distinguishing statements'
    )

    parser.add_argument(
        '--compare',
        nargs=2,
        type=int,
        metavar=('FACTOR_A', 'FACTOR_B'),
        help='Also contrast two factors'
    )

    parser.add_argument(
        '--output',
        help='Write results here instead of stdout'
    )

    return parser.parse_args(argv)


def run(document: Dict[str, Any],
        filter_threshold: Optional[float] = None,
        threshold_level: Optional[str] = None,
        compare: Optional[List[int]] = None) -> Dict[str, Any]:
    """
    Run both analyses over a parsed input document.

    Args:
        document: Mapping with 'factors', optional 'statements' and 'narratives'
        filter_threshold: Optional edge threshold override
        threshold_level: Optional distinguishing threshold override
        compare: Optional pair of factor ids to contrast

    Returns:
        JSON-ready results
    """
    config = ConfigManager.get_config()

    factors = document.get('factors') or []
    statements = document.get('statements')
    narratives = document.get('narratives')

    interactions = analyze_interactions(factors, narratives, filter_threshold, config)
    distinctions = analyze_distinctions(factors, statements, threshold_level, config)

    result = {
        'interactions': interactions.model_dump(),
        'distinctions': distinctions.model_dump(),
        'insights': distinctions.key_insights(),
    }

    if compare:
        result['contrast'] = distinctions.compare(compare[0], compare[1]).model_dump()

    return result


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.
    """
    # Parse arguments
    args = parse_args(argv)

    try:
        # Initialize configuration
        overrides = read_config_file(args.config) if args.config else None
        config = ConfigManager.get_config(overrides).validate()
    except QFactorMathError as e:
        setup_logging(args.log_level or 'WARNING')
        logger.error(f"Invalid configuration: {e}")
        return 1

    # Set up logging
    setup_logging(args.log_level or config.log_level)

    try:
        document = read_config_file(args.input)
        result = run(document, args.filter_threshold, args.threshold_level, args.compare)
    except QFactorMathError as e:
        logger.error(f"Analysis failed: {e}")
        return 1

    output = json.dumps(result, indent=2)
    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
    else:
        print(output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
