# xvtools

A collection of small, self-contained Unix-style tools and helpers:

- command-line programs: `cat`, `echo`, `grep`, `wc`, `find`, `ls`,
  a pipeline prime sieve and a concurrent file-system stress run;
- a tiny `grep` matcher that understands `^`, `.`, `*` and `$`;
- a parser for a minimal shell language (`|`, `;`, `&`, `<`, `>`, `>>`, parentheses);
- a next-fit free-list memory allocator model;
- a `printf`-style formatter understanding `%d %l %x %p %s %c %%`;
- helpers for Sv39 page-table arithmetic and ELF headers;
- a random file-system operation generator and a set of file-system checks.

It has no dependencies beyond the Python standard library (3.10 or newer).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

| Command        | What it does                                                        |
|----------------|---------------------------------------------------------------------|
| `xv-cat`       | copy files (or standard input) to standard output                   |
| `xv-echo`      | print its arguments separated by spaces                             |
| `xv-grep`      | `xv-grep pattern [file ...]`, print matching lines                  |
| `xv-wc`        | print line, word and byte counts followed by the name               |
| `xv-find`      | `xv-find path name`, print every path whose last part is `name`     |
| `xv-ls`        | list a file or the entries of a directory: name, type, inode, size  |
| `xv-primes`    | print `prime 2`, `prime 3`, `prime 5` from a chain of three sieve stages over 2..35 |
| `xv-stressfs`  | five workers write and read back `stressfs0`..`stressfs4` in the current directory |

Examples:

```
xv-echo hello world
xv-grep '^def ' xvtools/grep.py
xv-wc README.md
xv-find . grep.py
xv-ls xvtools
```

## Library use

```python
from xvtools.grep import match
from xvtools.shparse import parse_command
from xvtools.umalloc import Allocator
from xvtools.uprintf import format_message

match("^ab*c$", "abbbc")          # True
match("x.z", "the xyz end")       # True

tree = parse_command("cat < in | grep foo > out; echo done &")
# a ListCmd of a PipeCmd of RedirCmds, followed by a BackCmd

heap = Allocator(1 << 20)
address = heap.malloc(100)
heap.free(address)
heap.free_blocks()                # [(address, size in bytes), ...]

format_message("%d %x %s", -5, 255, "ok")   # "-5 FF ok"
```

Other modules:

- `xvtools.wc`: `count(data)` returns a `Counts(lines, words, chars)`.
- `xvtools.filestat`: `stat_path(path)` returns a `FileStat` with a `FileType`
  (`DIR`, `FILE`, `DEVICE`); also the open-mode flags `O_RDONLY`, `O_WRONLY`,
  `O_RDWR`, `O_CREATE`, `O_TRUNC`.
- `xvtools.shparse`: `Tokenizer`, the command classes `ExecCmd`, `RedirCmd`,
  `PipeCmd`, `ListCmd`, `BackCmd`, and `ShellSyntaxError`.
- `xvtools.riscv`: `pgroundup`, `pgrounddown`, `pa2pte`, `pte2pa`, `pte_flags`,
  `px`, `make_satp` and the `PteFlag` bits.
- `xvtools.elf`: `ElfHeader`, `ProgramHeader` (each with `parse` and `pack`),
  `program_headers(data)` and `ElfFormatError`.
- `xvtools.grind`: `ParkMiller`, `do_rand` and `grind_steps(directory, rng, steps)`,
  which runs random file operations inside a directory and returns a `Counter`
  of the operations run.
- `xvtools.usertests_files` and `xvtools.usertests_dirs`: `check_*(workdir)`
  functions, each working inside the directory given and raising `CheckFailed`
  when the file system misbehaves, for example `check_truncate1`,
  `check_linktest`, `check_subdir`, `check_sharedfd` and `check_bigdir`.

## What it does not do

- The shell parser only builds command trees; nothing here runs them.
- There are no `kill`, `ln`, `mkdir`, `rm` or `sleep` commands.
- There is no command or runner for the file-system checks; call the
  `check_*` functions yourself, for instance from a test suite.