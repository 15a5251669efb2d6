from user_service.app import main

main()
