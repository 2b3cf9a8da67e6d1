from onyx.chat.cli import main

main()
