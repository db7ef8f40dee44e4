"""Command-line interface for astronote."""


import argparse
import json
import logging
import sys
from typing import List

from terminaltables import AsciiTable

from astronote.api import Astronote
from astronote.conf import AstronoteConf
from astronote.errors import Error
from astronote.models import Note
from astronote.schedulers.base import MAX_QUALITY, MIN_QUALITY, encode_scheduler

QUALITY_HELP = """Quality of answer is a number from 0 to 6
0: complete blackout
1: incorrect response; the correct one remembered
2: incorrect response; where the correct one seemed easy to recall
3: correct response recalled with serious difficulty
4: correct response after a hesitation
5: perfect response
6: perfect response over multiple sessions

You can exit from astronote by pressing CTRL+C
"""


def _format_due(note: Note) -> str:
    return note.next_due.strftime('%Y-%m-%d %H:%M:%S')


def _print_note(note: Note) -> None:
    print(f'path: {note.path}')
    print(f'next due: {_format_due(note)}')
    scheduler = encode_scheduler(note.scheduler)
    print(f'scheduler: {scheduler["type"]}')
    for key, value in scheduler['state'].items():
        print(f'\t{key}: {value}')


def _add(args, an: Astronote) -> int:
    added = an.add(args.files)
    print(f'Added {len(added)} notes')
    return 0


def _input_quality(note: Note) -> int:
    while True:
        answer = input(f'Enter quality of answer [{MIN_QUALITY}-{MAX_QUALITY}] (or h for help, n for next dates): ')
        answer = answer.strip().lower()
        if answer == 'h':
            print(QUALITY_HELP)
        elif answer == 'n':
            print('Next due date for each quality of answer:')
            for quality in range(MIN_QUALITY, MAX_QUALITY + 1):
                print(f'{quality}: {note.preview(quality).strftime("%Y-%m-%d %H:%M:%S")}')
        elif answer.isdigit() and MIN_QUALITY <= int(answer) <= MAX_QUALITY:
            return int(answer)
        elif not answer:
            print('Empty input')
        else:
            print('Invalid input')


def _review(args, an: Astronote) -> int:
    notes = an.due(limit=args.num, ignore_schedule=args.ignore_schedule)
    if not notes:
        print('There is no file to review (for now)!')
        return 0
    for note in notes:
        print(f'Reviewing {an.absolute_path(note)}')
        editor = args.editor
        if not editor:
            editor = input(f'Enter editor to continue (or CTRL+C to cancel) [{an.conf.editor_command}]: ').strip()
        an.open_in_editor(note, editor or None)
        an.review(note, _input_quality(note))
        print(f'Next due: {_format_due(note)}')
        print()
    return 0


def _due(args, an: Astronote) -> int:
    notes = an.due(limit=args.num, ignore_schedule=args.ignore_schedule)
    if args.json:
        print(json.dumps([n.as_json() for n in notes]))
    elif args.table:
        data = [('Path', 'Next due', 'Repetitions', 'Interval')]
        for note in notes:
            state = encode_scheduler(note.scheduler)['state']
            data.append((note.path, _format_due(note),
                         state.get('repetition_count', ''), state.get('interval_days', '')))
        table = AsciiTable(data)
        table.justify_columns[2] = 'right'
        table.justify_columns[3] = 'right'
        print(table.table)
    else:
        for note in notes:
            print(f'{_format_due(note)}\t{note.path}')
    return 0


def _info(args, an: Astronote) -> int:
    note = an.find(args.path[0])
    if args.json:
        print(json.dumps(note.as_json()))
    else:
        _print_note(note)
    return 0


def _print_changed(verb: str, notes: List[Note]) -> None:
    for note in notes:
        print(f'{verb} {note.path}, next due {_format_due(note)}')


def _reset(args, an: Astronote) -> int:
    _print_changed('Reset', an.reset(args.paths))
    return 0


def _schedule(args, an: Astronote) -> int:
    _print_changed('Rescheduled', an.force_next(args.paths, args.days[0]))
    return 0


def _rm(args, an: Astronote) -> int:
    for note in an.remove(args.paths):
        print(f'Removed {note.path}')
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='astronote is a tool for spaced repetition of your notes.')
    parser.set_defaults(func=None)
    parser.add_argument('-v', '--verbose', action='store_true', help='Print debug logging to stderr.')
    parser.add_argument('-d', '--database', nargs=1,
                        help='Where to store note schedules, overriding the config file: the SQLite database file '
                             'or the metadata folder, depending on the configured repo type.')

    subs = parser.add_subparsers(title='Commands')

    p_add = subs.add_parser('add', help='Start tracking files. New notes are due for review immediately.')
    p_add.add_argument('files', nargs='+', help='Files to add. They must be inside the configured root folder.')
    p_add.set_defaults(func=_add)

    p_review = subs.add_parser(
        'review',
        help='Review due notes, earliest first. Each note is opened in an editor; when the editor exits, you '
             'enter the quality of your recall and the note is rescheduled.')
    p_review.add_argument('-n', '--num', type=int, help='Maximum number of notes to review.')
    p_review.add_argument('-i', '--ignore-schedule', action='store_true',
                          help='Review notes regardless of their due dates.')
    p_review.add_argument('-e', '--editor', help='Editor command to use, instead of prompting for one.')
    p_review.set_defaults(func=_review)

    p_due = subs.add_parser('due', help='List notes that are due for review, earliest first.')
    p_due.add_argument('-n', '--num', type=int, help='Maximum number of notes to list.')
    p_due.add_argument('-i', '--ignore-schedule', action='store_true', help='List all notes.')
    p_due_formats = p_due.add_mutually_exclusive_group()
    p_due_formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_due_formats.add_argument('-t', '--table', action='store_true', help='Format output as a table.')
    p_due.set_defaults(func=_due)

    p_info = subs.add_parser('info', help='Show the schedule of a note.')
    p_info.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_info.add_argument('path', nargs=1)
    p_info.set_defaults(func=_info)

    p_reset = subs.add_parser(
        'reset',
        help='Forget the review history of notes, making them due now as if they had just been added.')
    p_reset.add_argument('paths', nargs='+')
    p_reset.set_defaults(func=_reset)

    p_schedule = subs.add_parser(
        'schedule',
        help='Make notes due a number of days from now. This bypasses the scheduling algorithm, whose state is '
             'left unchanged, so the next review continues from the previous history.')
    p_schedule.add_argument('paths', nargs='+')
    p_schedule.add_argument('-d', '--days', nargs=1, type=int, required=True,
                            help='Days from now until the notes are due. May be 0 or negative.')
    p_schedule.set_defaults(func=_schedule)

    p_rm = subs.add_parser('rm', help='Stop tracking notes. The files themselves are not changed.')
    p_rm.add_argument('paths', nargs='+')
    p_rm.set_defaults(func=_rm)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        conf = AstronoteConf.for_path()
        if args.database:
            conf.repo_conf = conf.repo_conf.with_location(args.database[0])
        with conf.instantiate() as an:
            return args.func(args, an)
    except Error as ex:
        print(f'error: {ex}', file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print('\nCancelled', file=sys.stderr)
        return 130
