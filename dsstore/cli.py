'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   cli.py
   ------
   Command line front end. Reads a .DS_Store file and prints every
   record, or saves them to a csv file.

   For usage information, run:
     dsstore -h
'''

import argparse
import csv
import logging
import sys
import traceback

from dsstore import __version__
from dsstore.errors import DsStoreError
from dsstore.store import DsStore

__PROGRAMNAME = ".DS_Store Parser"

LOG_LEVELS = {
    'INFO'    : logging.INFO,
    'DEBUG'   : logging.DEBUG,
    'WARNING' : logging.WARNING,
    'ERROR'   : logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

def CreateLogger(log_file_path=None, log_file_level=logging.DEBUG, log_console_level=logging.INFO):
    '''Creates the logging classes for console & (optionally) file'''
    logger = logging.getLogger('MAIN')
    for handler in list(logger.handlers): # replace handlers from an earlier run
        logger.removeHandler(handler)
        handler.close()
    try:
        if log_file_path:
            log_file_handler = logging.FileHandler(log_file_path, encoding='utf8')
            log_file_format  = logging.Formatter('%(asctime)s|%(name)s|%(levelname)s|%(message)s', datefmt='%Y-%m-%d %H:%M:%S')
            log_file_handler.setFormatter(log_file_format)
            log_file_handler.setLevel(log_file_level)
            logger.addHandler(log_file_handler)

        log_console_handler = logging.StreamHandler()
        log_console_handler.setLevel(log_console_level)
        log_console_format  = logging.Formatter('%(name)s-%(levelname)s-%(message)s')
        log_console_handler.setFormatter(log_console_format)
        logger.addHandler(log_console_handler)
    except OSError:
        print ("Error while trying to create log file\nError Details:\n")
        traceback.print_exc()
        sys.exit ("Program aborted..could not create log file!")
    return logger

def GetRows(store):
    '''Returns list of [filename, tag, type, value] for output'''
    rows = []
    for filename, attributes in store:
        for tag, value in attributes.items():
            rows.append([filename, tag, value.kind.name, value.ToText()])
    return rows

def WriteCsv(rows, csv_path):
    with open(csv_path, 'w', newline='', encoding='utf8') as f:
        writer = csv.writer(f)
        writer.writerow(['File', 'Tag', 'Type', 'Value'])
        writer.writerows(rows)

def PrintRows(store, out=None):
    out = out or sys.stdout
    for filename, attributes in store:
        print(filename, file=out)
        for tag, value in attributes.items():
            print('    {} ({}) = {}'.format(tag, value.kind.name, value.ToText()), file=out)

def ParseArgs(argv=None):
    arg_parser = argparse.ArgumentParser(description='Reads a macOS .DS_Store file and lists the Finder '\
                                                     'metadata stored for each file\n'\
                                                     f'You are running {__PROGRAMNAME} version {__version__}',
                                         formatter_class=argparse.RawTextHelpFormatter)
    arg_parser.add_argument('input_path', help='Path to .DS_Store file')
    arg_parser.add_argument('-c', '--csv', help='Save output to this csv file instead of printing it')
    arg_parser.add_argument('-l', '--log_level', default='INFO', help='Log levels: INFO, DEBUG, WARNING, ERROR, CRITICAL (Default is INFO)')
    arg_parser.add_argument('--log_file', help='Also write log messages to this file')
    return arg_parser.parse_args(argv)

def main(argv=None):
    args = ParseArgs(argv)

    log_level = LOG_LEVELS.get(args.log_level.upper())
    if log_level is None:
        print("Exiting -> Invalid input type for log level. Valid values are INFO, DEBUG, WARNING, ERROR, CRITICAL", file=sys.stderr)
        return 2
    log = CreateLogger(args.log_file, log_level, log_level)
    log.setLevel(log_level)
    log.debug("Started {}, version {}".format(__PROGRAMNAME, __version__))

    try:
        store = DsStore.FromFile(args.input_path)
    except OSError as ex:
        log.error("Could not read file {} : {}".format(args.input_path, str(ex)))
        return 1
    except DsStoreError as ex:
        log.error("Failed to parse {} : {}".format(args.input_path, str(ex)))
        return 1

    if args.csv:
        rows = GetRows(store)
        try:
            WriteCsv(rows, args.csv)
        except OSError as ex:
            log.error("Could not write csv file {} : {}".format(args.csv, str(ex)))
            return 1
        log.info("Wrote {} records to {}".format(len(rows), args.csv))
    else:
        PrintRows(store)
    log.info("Found {} entries ({} records declared)".format(len(store), store.directory.num_records))
    return 0

if __name__ == '__main__':
    sys.exit(main())
