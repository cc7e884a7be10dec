import argparse, json, sys
from datetime import date

import structlog

from .config import settings
from .data_loader import build_board, load_scenario, standard_scenario
from .errors import CritPathError
from .kpis import compute_kpis
from .logs import configure_logging

log = structlog.get_logger()


def print_summary(board, header='Summary', fmt=None):
    fmt = fmt or settings.date_format
    show = lambda d: d.strftime(fmt) if d else '-'
    print(f'\n=== {header} ===')
    for t in board.tasks.values():
        deps = ', '.join(d.title for d in board.dependencies_of(t.id)) or 'None'
        labels = [f'Earliest start {show(t.earliest_start)}', f'Earliest finish {show(t.earliest_finish)}',
                  f'Due {show(t.due_date)}', 'CRITICAL' if t.critical_path else '']
        print(f"- {t.title} [effort {t.duration_days}d] | {' | '.join(lb for lb in labels if lb)} | depends on: {deps}")


def report(board, header, as_json):
    if as_json:
        k = compute_kpis(list(board.tasks.values()), board.schedule)
        print(json.dumps({'header': header, **k}, indent=2))
    else:
        print_summary(board, header)


def main(argv=None):
    ap = argparse.ArgumentParser(description='Critical path scheduler')
    ap.add_argument('--data', default=settings.data_path, help='scenario file (.json, .xlsx, .csv)')
    ap.add_argument('--today', type=date.fromisoformat, default=None, help='reference date, YYYY-MM-DD')
    ap.add_argument('--delete', nargs='*', default=[], metavar='REF', help='task refs to delete after loading')
    ap.add_argument('--json', action='store_true', help='print KPIs as JSON')
    ap.add_argument('--log-level', default=settings.log_level)
    args = ap.parse_args(argv)
    configure_logging(level=args.log_level, json_output=settings.log_json)
    try:
        scen = load_scenario(args.data) if args.data else standard_scenario()
        board, refs = build_board(scen, today=args.today)
        report(board, 'After load', args.json)
        deletions = []
        for r in dict.fromkeys([*scen.deletions, *args.delete]):
            if r in refs: deletions.append(r)
            else: log.warning('unknown_ref', ref=r)
        if deletions:
            for ref in deletions:
                board.delete_task(refs[ref])
            board.recompute()
            report(board, 'After deletions', args.json)
    except CritPathError as e:
        log.error('critpath_failed', error=e.message, **e.details)
        return 1
    return 0


if __name__ == '__main__': sys.exit(main())
