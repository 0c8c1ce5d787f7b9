from kwallet.main import main

main()
