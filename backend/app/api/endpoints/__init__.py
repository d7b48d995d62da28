"""
Endpoints da API.

Módulos disponíveis:
- agendamentos: Reserva, consulta e cancelamento de agendamentos
- auth: Login da equipe e do super admin
- bloqueios: Situação e gestão de bloqueios de CPF
- config: Grade de horários da prefeitura
- datas_bloqueadas: Datas e horários indisponíveis
- health: Health check
- localidades: Localidades de origem e bairros
- locais: Locais de atendimento
- prefeituras: Cadastro de prefeituras (super admin)
- usuarios: Equipe da prefeitura
"""
