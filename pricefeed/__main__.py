from pricefeed.cli import main

main()
