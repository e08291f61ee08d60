from pyautodj.cli import cli_main

cli_main()
