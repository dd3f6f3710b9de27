from nextvod.main import main

main()
