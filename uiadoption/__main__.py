from uiadoption.cli import main

main()
